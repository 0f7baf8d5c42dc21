"""Image captioning agent."""
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from agents.base import GROQ_MODEL, BaseAgent, bounded_count
from core.config import ModelConfig, config
from core.llm import LLMClient
from tools.images import ImageDescriber, VisionImageDescriber
from tools.section_parser import NUMBERED_RE, strip_bullet, strip_heading, strip_markdown
from tools.text_input import looks_like_file

STYLE_GUIDES = {
    "descriptive": "Detailed and vivid descriptions of what's in the image",
    "concise": "Short, punchy captions that capture the essence",
    "humorous": "Fun, witty captions with humor",
    "poetic": "Artistic, metaphorical language",
    "technical": "Precise, factual descriptions",
}
DEFAULT_STYLE_GUIDE = "Natural, engaging captions suitable for social media"

DEFAULT_CAPTION = "A beautiful image that captures a moment worth remembering."
DEFAULT_HASHTAGS = ["#photography", "#beautiful", "#moment"]
MAX_CAPTIONS = 10

CAPTION_RE = re.compile(r"^caption\s*#?(\d+)\s*[:.)-]?\s*(.*)$", re.I)
DETAIL_WORDS = ("hashtag", "length", "category", "use case", "best for")


class Caption(BaseModel):
    id: int
    text: str = ""
    hashtags: List[str] = Field(default_factory=list)
    length_category: str = "medium"
    best_use_case: str = "social media"


def supported_styles() -> List[str]:
    return ["descriptive", "concise", "humorous", "poetic", "technical", "marketing", "storytelling"]


def filename_description(filename: str) -> str:
    """What the prompt gets for an image file when no describer is configured."""
    return f"An image file named \"{filename}\" (no visual description is available)"


def _after_label(line: str) -> str:
    return line.split(":", 1)[1].strip() if ":" in line else line


def parse_captions(response: str, max_captions: int, include_tags: bool) -> List[Caption]:
    """Split the completion into captions, padding to `max_captions` with a stock caption."""
    captions: List[Caption] = []
    current: Optional[Caption] = None

    def start(text: str) -> Caption:
        if current is not None and current.text:
            captions.append(current)
        return Caption(id=len(captions) + 1, text=text)

    lines = [strip_markdown(strip_heading(raw)) for raw in response.splitlines()]
    # Numbered lines only start captions when there are no "Caption N" markers.
    numbered_starts = not any(CAPTION_RE.match(line) for line in lines)

    for line in lines:
        if not line:
            continue
        lowered = line.lower()
        caption = CAPTION_RE.match(line)

        if caption:
            current = start(strip_markdown(caption.group(2)))
        elif (numbered_starts and NUMBERED_RE.match(line) and "#" not in line
              and not any(word in lowered for word in DETAIL_WORDS)):
            current = start(strip_markdown(strip_bullet(line) or ""))
        elif current is None:
            if len(line) > 10 and ":" not in line:
                current = start(line)
        else:
            detail = strip_markdown(strip_bullet(line) or line)
            hashtags = re.findall(r"#\w+", detail)
            if "hashtag" in lowered or hashtags:
                if include_tags and hashtags:
                    current.hashtags = hashtags
            elif "length" in lowered or "category" in lowered:
                size = re.search(r"\b(short|medium|long)\b", detail, re.I)
                if size:
                    current.length_category = size.group(1).lower()
            elif "use case" in lowered or "best for" in lowered:
                current.best_use_case = _after_label(detail)
            elif not current.text:
                current.text = _after_label(detail) if "caption" in lowered else detail

    if current is not None and current.text:
        captions.append(current)

    while len(captions) < max_captions:
        captions.append(Caption(
            id=len(captions) + 1,
            text=DEFAULT_CAPTION,
            hashtags=list(DEFAULT_HASHTAGS) if include_tags else [],
        ))
    return captions[:max_captions]


class ImageCaptionAgent(BaseAgent):
    """Writes captions for an image from a vision description, or from its filename and context."""

    slug = "image_caption"
    name = "Image Captioner"
    description = "Generate styled captions and hashtags for an image"
    model = ModelConfig(provider="groq", model_name=GROQ_MODEL, temperature=0.7, max_tokens=500)
    failure_context = "Caption generation failed"
    payload_keys = ("captions",)
    required_fields = {"image_file": "Image file path is required"}

    def __init__(self, llm: Optional[LLMClient] = None, describer: Optional[ImageDescriber] = None):
        super().__init__(llm)
        if describer is None and config.providers.openai_api_key:
            describer = VisionImageDescriber()
        self.describer = describer

    def validate(self, input_data: Dict[str, Any]) -> None:
        super().validate(input_data)
        bounded_count(input_data, "max_captions", 1, MAX_CAPTIONS)

    async def describe(self, image_file: str, context: Optional[str] = None) -> str:
        if looks_like_file(image_file):
            if self.describer is not None:
                description = await self.describer.describe(image_file)
            else:
                description = filename_description(Path(image_file).name)
        else:
            # Not a file on disk: treat the value as a description of the image.
            description = image_file
        if context:
            description = f"{description}. Context: {context}"
        return description

    async def execute(self, input_data: Dict[str, Any]) -> Dict[str, Any]:
        image_file = input_data["image_file"]
        style = input_data.get("caption_style") or "descriptive"
        max_captions = bounded_count(input_data, "max_captions", 1, MAX_CAPTIONS)
        include_tags = input_data.get("include_tags", True) is not False

        description = await self.describe(image_file, input_data.get("context"))
        response = await self.complete(
            "image_caption",
            max_captions=max_captions,
            description=description,
            style=style,
            include_tags="Yes" if include_tags else "No",
            style_guide=STYLE_GUIDES.get(style, DEFAULT_STYLE_GUIDE),
            hashtag_instruction="Relevant hashtags (3-5)" if include_tags else "Skip hashtags",
        )

        return {
            "captions": [caption.model_dump() for caption in parse_captions(response, max_captions, include_tags)],
            "image_file": Path(image_file).name if looks_like_file(image_file) else None,
            "image_description": description,
            "caption_style": style,
            "max_captions": max_captions,
            "include_tags": include_tags,
            "generated_at": datetime.now().isoformat(),
        }
