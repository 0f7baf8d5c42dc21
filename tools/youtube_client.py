"""YouTube Data API v3 client."""
import logging
import re
from typing import Any, Dict, List, Optional

import aiohttp
from pydantic import BaseModel

from core.config import YouTubeConfig, config
from core.exceptions import ServiceError

logger = logging.getLogger(__name__)

DURATION_RE = re.compile(r"PT(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?")
PLAYLIST_RE = re.compile(r"[?&]list=([A-Za-z0-9_-]+)")
VIDEO_ID_PATTERNS = [
    re.compile(r"(?:youtube\.com/watch\?v=|youtu\.be/|youtube\.com/embed/)([^&\n?#]+)"),
    re.compile(r"youtube\.com/v/([^&\n?#]+)"),
]
MAX_RESULTS = 50


def parse_duration(duration: Optional[str]) -> int:
    """Seconds in an ISO-8601 duration such as PT1H2M3S; 0 when unparseable."""
    if not duration:
        return 0
    match = DURATION_RE.match(duration)
    if not match:
        return 0
    hours, minutes, seconds = (int(part or 0) for part in match.groups())
    return hours * 3600 + minutes * 60 + seconds


def extract_playlist_id(url: str) -> Optional[str]:
    match = PLAYLIST_RE.search(url)
    return match.group(1) if match else None


def extract_video_id(url: str) -> Optional[str]:
    for pattern in VIDEO_ID_PATTERNS:
        match = pattern.search(url)
        if match:
            return match.group(1)
    return None


class Video(BaseModel):
    title: str
    channel: str = ""
    description: str = ""
    video_id: str
    url: str
    thumbnail: Optional[str] = None
    published_at: Optional[str] = None
    duration: str = "Unknown"
    duration_seconds: int = 0
    view_count: int = 0
    like_count: int = 0


def _thumbnail(snippet: Dict[str, Any]) -> Optional[str]:
    thumbnails = snippet.get("thumbnails") or {}
    for size in ("high", "medium", "default"):
        if thumbnails.get(size, {}).get("url"):
            return thumbnails[size]["url"]
    return None


def build_video(video_id: str, snippet: Dict[str, Any], details: Dict[str, Any]) -> Video:
    duration = (details.get("contentDetails") or {}).get("duration") or "Unknown"
    statistics = details.get("statistics") or {}
    return Video(
        title=snippet.get("title", ""),
        channel=snippet.get("channelTitle", ""),
        description=snippet.get("description", ""),
        video_id=video_id,
        url=f"https://www.youtube.com/watch?v={video_id}",
        thumbnail=_thumbnail(snippet),
        published_at=snippet.get("publishedAt"),
        duration=duration,
        duration_seconds=parse_duration(duration),
        view_count=int(statistics.get("viewCount") or 0),
        like_count=int(statistics.get("likeCount") or 0),
    )


class YouTubeClient:
    """Search, playlist and video-detail lookups over aiohttp."""

    def __init__(self, settings: Optional[YouTubeConfig] = None, timeout: float = 15):
        self.settings = settings or config.youtube
        self.timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self.settings.api_key)

    def require_key(self):
        if not self.configured:
            raise ServiceError("YouTube API key not configured")

    async def _get(self, endpoint: str, params: Dict[str, Any]) -> Dict[str, Any]:
        self.require_key()
        query = {**params, "key": self.settings.api_key}
        url = f"{self.settings.base_url}/{endpoint}"
        try:
            async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=self.timeout)) as session:
                async with session.get(url, params=query) as response:
                    if response.status != 200:
                        detail = await response.text()
                        raise ServiceError(f"YouTube {endpoint} request failed ({response.status}): {detail[:200]}")
                    return await response.json()
        except aiohttp.ClientError as e:
            raise ServiceError(f"YouTube {endpoint} request failed: {e}") from e

    async def video_details(self, video_ids: List[str]) -> Dict[str, Dict[str, Any]]:
        """contentDetails and statistics per id; empty when the lookup fails."""
        if not video_ids:
            return {}
        try:
            data = await self._get("videos", {"part": "contentDetails,statistics", "id": ",".join(video_ids)})
        except ServiceError as e:
            logger.warning("Video details unavailable: %s", e)
            return {}
        return {item["id"]: item for item in data.get("items", [])}

    async def search(self, query: str, limit: int = 20, order: str = "relevance", duration: str = "any") -> List[Video]:
        params = {
            "part": "snippet",
            "q": query,
            "type": "video",
            "order": order,
            "maxResults": min(limit, MAX_RESULTS),
        }
        if duration != "any":
            params["videoDuration"] = duration
        data = await self._get("search", params)
        items = [item for item in data.get("items", []) if item.get("id", {}).get("videoId")]

        details = await self.video_details([item["id"]["videoId"] for item in items])
        return [
            build_video(item["id"]["videoId"], item.get("snippet", {}), details.get(item["id"]["videoId"], {}))
            for item in items
        ]

    async def playlist(self, playlist_id: str, limit: int = 20) -> List[Video]:
        data = await self._get(
            "playlistItems",
            {"part": "snippet", "playlistId": playlist_id, "maxResults": min(limit, MAX_RESULTS)},
        )
        items = [item for item in data.get("items", []) if item.get("snippet", {}).get("resourceId")]
        ids = [item["snippet"]["resourceId"]["videoId"] for item in items]

        details = await self.video_details(ids)
        return [
            build_video(video_id, item["snippet"], details.get(video_id, {}))
            for video_id, item in zip(ids, items)
        ]
