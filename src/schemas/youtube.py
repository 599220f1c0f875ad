"""Video search schemas."""

from typing import List, Optional

from pydantic import Field

from config import YOUTUBE_DEFAULT_MAX_RESULTS
from schemas.common import CamelModel


class VideoSearchRequest(CamelModel):
    query: Optional[str] = None
    max_results: int = Field(default=YOUTUBE_DEFAULT_MAX_RESULTS, ge=1, le=50)


class VideoInfo(CamelModel):
    video_id: str
    title: str
    description: str = ""
    thumbnail: Optional[str] = None
    channel_title: str = ""
    published_at: Optional[str] = None
    url: str


class VideoSearchResponse(CamelModel):
    success: bool = True
    count: int
    videos: List[VideoInfo]
