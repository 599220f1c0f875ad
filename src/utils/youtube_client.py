"""Client for the YouTube Data API search endpoint."""

import logging
from typing import List, Optional

import requests

from config import YOUTUBE_API_URL, YOUTUBE_DEFAULT_MAX_RESULTS, YOUTUBE_TIMEOUT
from core.exceptions import UpstreamError
from schemas.youtube import VideoInfo

logger = logging.getLogger(__name__)

WATCH_URL = "https://www.youtube.com/watch?v={video_id}"
SEARCH_FAILED_MESSAGE = "Failed to fetch videos from YouTube"


class YouTubeClient:
    """Searches study videos. No retries and no caching."""

    def __init__(
        self,
        api_key: Optional[str],
        session: Optional[requests.Session] = None,
        api_url: str = YOUTUBE_API_URL,
        timeout: float = YOUTUBE_TIMEOUT,
    ):
        self.api_key = api_key
        self.session = session or requests.Session()
        self.api_url = api_url
        self.timeout = timeout

    def search(self, query: str, max_results: int = YOUTUBE_DEFAULT_MAX_RESULTS) -> List[VideoInfo]:
        """Search videos for a free-text query.

        Args:
            query: Search terms.
            max_results: Upper bound on the number of videos returned.

        Returns:
            List of VideoInfo in provider order.

        Raises:
            UpstreamError: If the key is missing or the provider call fails.
        """
        if not self.api_key:
            raise UpstreamError(SEARCH_FAILED_MESSAGE, "YOUTUBE_API_KEY is not set")

        params = {
            "part": "snippet",
            "q": query,
            "type": "video",
            "maxResults": max_results,
            "key": self.api_key,
            "relevanceLanguage": "en",
            "safeSearch": "strict",
        }
        try:
            response = self.session.get(self.api_url, params=params, timeout=self.timeout)
            response.raise_for_status()
            items = response.json().get("items", [])
        except (requests.RequestException, ValueError) as e:
            logger.error("YouTube API error: %s", e)
            raise UpstreamError(SEARCH_FAILED_MESSAGE, str(e)) from e

        videos = []
        for item in items:
            video_id = (item.get("id") or {}).get("videoId")
            if not video_id:
                continue
            snippet = item.get("snippet") or {}
            thumbnails = snippet.get("thumbnails") or {}
            thumbnail = (thumbnails.get("medium") or thumbnails.get("default") or {}).get("url")
            videos.append(
                VideoInfo(
                    video_id=video_id,
                    title=snippet.get("title", ""),
                    description=snippet.get("description", ""),
                    thumbnail=thumbnail,
                    channel_title=snippet.get("channelTitle", ""),
                    published_at=snippet.get("publishedAt"),
                    url=WATCH_URL.format(video_id=video_id),
                )
            )
        return videos[:max_results]
