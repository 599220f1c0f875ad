"""Tests for the YouTube search route and client."""

import pytest
import requests

from conftest import FakeResponse, FakeSession
from core.exceptions import UpstreamError
from utils.youtube_client import YouTubeClient

SEARCH_PAYLOAD = {
    "items": [
        {
            "id": {"kind": "youtube#video", "videoId": "abc123"},
            "snippet": {
                "title": "Entropy explained",
                "description": "A short lecture",
                "channelTitle": "Physics Hub",
                "publishedAt": "2023-01-02T03:04:05Z",
                "thumbnails": {
                    "default": {"url": "https://i.ytimg.com/vi/abc123/default.jpg"},
                    "medium": {"url": "https://i.ytimg.com/vi/abc123/mqdefault.jpg"},
                },
            },
        },
        {
            "id": {"kind": "youtube#video", "videoId": "def456"},
            "snippet": {"title": "Second law", "thumbnails": {}},
        },
    ]
}


def test_search_maps_videos_and_sends_safe_params(client, student, youtube_session):
    headers, _ = student
    youtube_session.response = FakeResponse(SEARCH_PAYLOAD)

    response = client.post("/api/youtube/search", json={"query": "entropy"}, headers=headers)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["count"] == 2
    first = body["videos"][0]
    assert first["videoId"] == "abc123"
    assert first["url"] == "https://www.youtube.com/watch?v=abc123"
    assert first["thumbnail"] == "https://i.ytimg.com/vi/abc123/mqdefault.jpg"
    assert first["channelTitle"] == "Physics Hub"
    assert body["videos"][1]["thumbnail"] is None

    params = youtube_session.calls[0]["params"]
    assert params["q"] == "entropy"
    assert params["type"] == "video"
    assert params["maxResults"] == 3
    assert params["safeSearch"] == "strict"
    assert params["relevanceLanguage"] == "en"


def test_search_passes_max_results(client, student, youtube_session):
    headers, _ = student

    client.post(
        "/api/youtube/search", json={"query": "optics", "maxResults": 7}, headers=headers
    )

    assert youtube_session.calls[0]["params"]["maxResults"] == 7


def test_search_without_query_is_rejected(client, student, youtube_session):
    headers, _ = student

    response = client.post("/api/youtube/search", json={"query": ""}, headers=headers)

    assert response.status_code == 400
    assert response.json()["message"] == "Search query is required"
    assert youtube_session.calls == []


def test_search_provider_error_returns_error_envelope(client, student, youtube_session):
    headers, _ = student
    youtube_session.error = requests.ConnectionError("connection refused")

    response = client.post("/api/youtube/search", json={"query": "entropy"}, headers=headers)

    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Failed to fetch videos from YouTube"
    assert "connection refused" in body["error"]


def test_client_raises_on_http_error():
    session = FakeSession(response=FakeResponse(status_code=403))

    with pytest.raises(UpstreamError):
        YouTubeClient("key", session=session).search("entropy")


def test_client_without_key_does_not_call_provider():
    session = FakeSession()

    with pytest.raises(UpstreamError):
        YouTubeClient("", session=session).search("entropy")
    assert session.calls == []
