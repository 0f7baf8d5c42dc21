"""YouTube finder agent."""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from agents.base import BaseAgent, require_any
from core.config import ModelConfig
from core.exceptions import LLMError
from core.llm import LLMClient
from tools.json_extraction import strip_code_fences
from tools.youtube_client import Video, YouTubeClient, extract_playlist_id

logger = logging.getLogger(__name__)

MIN_VIDEO_SECONDS = 60


def clean_enhanced_query(response: str, original: str) -> str:
    """First non-empty line of the completion, unquoted; the original query if there is none."""
    for line in strip_code_fences(response).splitlines():
        line = line.strip().strip('"').strip("'").strip()
        if line:
            return line
    return original


def filter_videos(videos: List[Video], sort_by: str = "relevance", min_views: int = 0) -> List[Video]:
    """Drop shorts (known duration under a minute) and low-view videos, then sort."""
    kept = [
        video for video in videos
        if (video.duration == "Unknown" or video.duration_seconds >= MIN_VIDEO_SECONDS)
        and video.view_count >= min_views
    ]
    if sort_by == "viewCount":
        kept.sort(key=lambda video: video.view_count, reverse=True)
    elif sort_by == "rating":
        kept.sort(key=lambda video: video.like_count, reverse=True)
    return kept


class YouTubeFinderAgent(BaseAgent):
    """Finds long-form educational videos for a query, or lists a playlist."""

    slug = "youtube_finder"
    name = "YouTube Finder"
    description = "Search YouTube for lectures and tutorials, or list the videos in a playlist"
    model = ModelConfig(provider="groq", model_name="llama3-70b-8192", temperature=0.3, max_tokens=100)
    failure_context = "YouTube search failed"
    payload_keys = ("videos",)

    def __init__(self, llm: Optional[LLMClient] = None, client: Optional[YouTubeClient] = None):
        super().__init__(llm)
        self.client = client or YouTubeClient()

    def validate(self, input_data: Dict[str, Any]) -> None:
        require_any(
            input_data, ("query", "query_or_playlist_url", "prompt"), "Please provide a search query or playlist URL"
        )

    async def enhance_query(self, query: str) -> str:
        try:
            response = await self.complete("youtube_finder", query=query)
        except LLMError as e:
            logger.warning("Query enhancement failed, searching with the original query: %s", e)
            return query
        return clean_enhanced_query(response, query)

    async def execute(self, input_data: Dict[str, Any]) -> Dict[str, Any]:
        _, query = require_any(
            input_data, ("query", "query_or_playlist_url", "prompt"), "Please provide a search query or playlist URL"
        )
        limit = int(input_data.get("limit") or 20)
        self.client.require_key()

        playlist_id = extract_playlist_id(query) if "youtube.com/playlist" in query else None
        if playlist_id:
            videos = await self.client.playlist(playlist_id, limit)
            return {
                "videos": [video.model_dump() for video in videos],
                "playlist_id": playlist_id,
                "total_results": len(videos),
                "searched_at": datetime.now().isoformat(),
            }

        sort_by = input_data.get("sort_by") or input_data.get("sortBy") or "relevance"
        duration = input_data.get("duration") or "any"
        min_views = int(input_data.get("min_views") or 0)

        enhanced = await self.enhance_query(query)
        order = sort_by if sort_by in ("relevance", "date", "viewCount", "rating") else "relevance"
        videos = filter_videos(await self.client.search(enhanced, limit, order, duration), sort_by, min_views)

        return {
            "videos": [video.model_dump() for video in videos],
            "enhanced_query": enhanced,
            "total_results": len(videos),
            "filters": {"sort_by": sort_by, "duration": duration, "min_views": min_views},
            "searched_at": datetime.now().isoformat(),
        }
