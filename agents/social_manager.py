"""Social media post planner agent."""
import re
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from agents.base import GROQ_MODEL, BaseAgent, bounded_count
from core.config import ModelConfig
from tools.section_parser import strip_bullet, strip_heading, strip_markdown

POST_RE = re.compile(r"^post\s*#?(\d+)\b[:.)\-]*\s*(.*)$", re.I)
OVERALL_RE = re.compile(r"^overall\s+strategy\s*:?\s*(.*)$", re.I)
DEFAULT_POST_COUNT = 5
MAX_POST_COUNT = 20


class SocialPost(BaseModel):
    id: int
    content: str = ""
    hashtags: List[str] = Field(default_factory=list)
    best_time: str = ""
    engagement_tip: str = ""
    visual_suggestion: str = ""
    platform: str = ""


def _value(line: str) -> str:
    return line.split(":", 1)[1].strip() if ":" in line else line


def sample_post(index: int, platform: str) -> SocialPost:
    return SocialPost(
        id=index,
        content=f"Sample post {index} about the topic",
        hashtags=["#sample", "#content"],
        best_time="9 AM",
        engagement_tip="Ask for opinions in comments",
        visual_suggestion="Relevant image or graphic",
        platform=platform,
    )


def parse_social_posts(response: str, platform: str, expected: int) -> Dict[str, Any]:
    """Split into posts by "Post N" markers; pads with sample posts up to `expected`."""
    posts: List[SocialPost] = []
    current: Optional[SocialPost] = None
    strategy: List[str] = []
    in_strategy = False

    for raw in response.splitlines():
        line = strip_markdown(strip_heading(raw))
        if not line or line.startswith("```"):
            continue

        marker = POST_RE.match(line)
        if marker:
            current = SocialPost(id=len(posts) + 1, platform=platform)
            posts.append(current)
            in_strategy = False
            rest = strip_markdown(marker.group(2))
            if len(rest) > 10:
                current.content = rest
            continue

        overall = OVERALL_RE.match(line)
        if overall:
            in_strategy = True
            current = None
            if overall.group(1):
                strategy.append(overall.group(1))
            continue
        if in_strategy:
            strategy.append(line)
            continue
        if current is None:
            continue

        detail = strip_markdown(strip_bullet(line) or line)
        lowered = detail.lower()
        hashtags = re.findall(r"#\w+", detail)
        if lowered.startswith("hashtag") or (hashtags and len(hashtags) * 2 >= len(detail.split())):
            current.hashtags = hashtags
        elif "best time" in lowered or "posting time" in lowered:
            current.best_time = _value(detail)
        elif lowered.startswith(("engagement", "strategy", "cta")):
            current.engagement_tip = _value(detail)
        elif lowered.startswith(("visual", "image")):
            current.visual_suggestion = _value(detail)
        elif lowered.startswith(("text:", "post text:", "caption:")):
            current.content = _value(detail)
        elif len(detail) > 10:
            current.content = f"{current.content} {detail}".strip()

    posts = [post for post in posts if post.content]
    for index, post in enumerate(posts, start=1):
        post.id = index
    while len(posts) < expected:
        posts.append(sample_post(len(posts) + 1, platform))

    return {"posts": posts[:expected], "strategy": " ".join(strategy).strip()}


class SocialManagerAgent(BaseAgent):
    """Plans a batch of platform-specific social media posts."""

    slug = "social_manager"
    name = "Social Media Manager"
    description = "Platform-specific social posts with hashtags, timing and engagement tips"
    model = ModelConfig(provider="groq", model_name=GROQ_MODEL, temperature=0.7, max_tokens=1500)
    failure_context = "Social content generation failed"
    payload_keys = ("posts",)
    required_fields = {
        "content_topic": "Content topic is required",
        "platform": "Social media platform is required",
        "target_audience": "Target audience is required",
    }

    def validate(self, input_data: Dict[str, Any]) -> None:
        super().validate(input_data)
        bounded_count(input_data, "post_count", DEFAULT_POST_COUNT, MAX_POST_COUNT)

    async def execute(self, input_data: Dict[str, Any]) -> Dict[str, Any]:
        platform = input_data["platform"]
        audience = input_data["target_audience"]
        tone = input_data.get("tone") or "professional"
        count = bounded_count(input_data, "post_count", DEFAULT_POST_COUNT, MAX_POST_COUNT)

        response = await self.complete(
            "social_manager",
            count=count,
            platform=platform,
            topic=input_data["content_topic"],
            audience=audience,
            tone=tone,
        )
        parsed = parse_social_posts(response, platform, count)

        return {
            "posts": [post.model_dump() for post in parsed["posts"]],
            "strategy": parsed["strategy"],
            "platform": platform,
            "target_audience": audience,
            "tone": tone,
            "post_count": count,
            "generated_at": datetime.now().isoformat(),
        }
