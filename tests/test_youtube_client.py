"""Tests for the YouTube Data API client, with HTTP stubbed out."""
import pytest

from core.config import YouTubeConfig
from core.exceptions import ServiceError
from tools.youtube_client import (
    YouTubeClient,
    build_video,
    extract_playlist_id,
    extract_video_id,
    parse_duration,
)

SNIPPET = {
    "title": "Linear Algebra 1",
    "channelTitle": "MIT",
    "publishedAt": "2020-01-01T00:00:00Z",
    "thumbnails": {"default": {"url": "https://img/default.jpg"}, "high": {"url": "https://img/high.jpg"}},
}


def test_parse_duration() -> None:
    assert parse_duration("PT1H2M3S") == 3723
    assert parse_duration("PT45S") == 45
    assert parse_duration("PT10M") == 600
    assert parse_duration(None) == 0
    assert parse_duration("bogus") == 0


def test_url_helpers() -> None:
    assert extract_playlist_id("https://www.youtube.com/playlist?list=PL123abc") == "PL123abc"
    assert extract_playlist_id("https://www.youtube.com/watch?v=x") is None
    assert extract_video_id("https://youtu.be/abc123?t=5") == "abc123"
    assert extract_video_id("https://www.youtube.com/watch?v=xyz&list=PL1") == "xyz"


def test_build_video() -> None:
    video = build_video("vid1", SNIPPET, {"contentDetails": {"duration": "PT5M"}, "statistics": {"viewCount": "42"}})
    assert video.url == "https://www.youtube.com/watch?v=vid1"
    assert video.thumbnail == "https://img/high.jpg"
    assert video.duration_seconds == 300
    assert video.view_count == 42

    bare = build_video("vid2", {}, {})
    assert bare.duration == "Unknown"
    assert bare.duration_seconds == 0


async def test_requires_api_key() -> None:
    client = YouTubeClient(YouTubeConfig(api_key=""))
    assert not client.configured
    with pytest.raises(ServiceError, match="YouTube API key not configured"):
        await client.search("anything")


async def test_search_merges_video_details() -> None:
    client = YouTubeClient(YouTubeConfig(api_key="key"))
    requests = []

    async def fake_get(endpoint, params):
        requests.append((endpoint, params))
        if endpoint == "search":
            return {"items": [
                {"id": {"videoId": "a"}, "snippet": SNIPPET},
                {"id": {"channelId": "skip"}, "snippet": SNIPPET},
            ]}
        return {"items": [{"id": "a", "contentDetails": {"duration": "PT20M"}, "statistics": {"likeCount": "7"}}]}

    client._get = fake_get
    videos = await client.search("linear algebra", limit=80, order="viewCount", duration="long")

    assert [video.video_id for video in videos] == ["a"]
    assert videos[0].duration_seconds == 1200
    assert videos[0].like_count == 7
    search_params = requests[0][1]
    assert search_params["maxResults"] == 50
    assert search_params["videoDuration"] == "long"
    assert requests[1] == ("videos", {"part": "contentDetails,statistics", "id": "a"})


async def test_missing_details_leave_duration_unknown() -> None:
    client = YouTubeClient(YouTubeConfig(api_key="key"))

    async def fake_get(endpoint, params):
        if endpoint == "videos":
            raise ServiceError("quota exceeded")
        assert "videoDuration" not in params
        return {"items": [{"id": {"videoId": "a"}, "snippet": SNIPPET}]}

    client._get = fake_get
    videos = await client.search("linear algebra")
    assert videos[0].duration == "Unknown"


async def test_playlist() -> None:
    client = YouTubeClient(YouTubeConfig(api_key="key"))

    async def fake_get(endpoint, params):
        if endpoint == "playlistItems":
            assert params["playlistId"] == "PL1"
            return {"items": [
                {"snippet": {**SNIPPET, "resourceId": {"videoId": "p1"}}},
                {"snippet": {"title": "deleted"}},
            ]}
        return {"items": []}

    client._get = fake_get
    videos = await client.playlist("PL1")
    assert [video.video_id for video in videos] == ["p1"]
