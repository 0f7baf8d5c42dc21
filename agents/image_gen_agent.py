"""Image prompt designer agent."""
import re
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from agents.base import GROQ_MODEL, BaseAgent
from core.config import ModelConfig
from core.llm import LLMClient
from tools.images import ImageGenerator
from tools.section_parser import Section, SectionParser, strip_markdown

SPEC_SECTIONS = SectionParser([
    Section("negative_prompt", ("negative",)),
    Section("prompt", ("enhanced prompt", "prompt")),
    Section("style", ("style",)),
    Section("composition", ("composition",)),
    Section("colors", ("color", "colour", "palette")),
    Section("technical", ("technical", "resolution", "aspect ratio"), kind="block"),
])

RESOLUTION_RE = re.compile(r"(\d{3,4})\s*[x×]\s*(\d{3,4})")
ASPECT_RE = re.compile(r"\b(\d{1,2}:\d{1,2})\b")
GENERATOR_SIZES = ("1024x1024", "1792x1024", "1024x1792")


class TechnicalSpec(BaseModel):
    resolution: str = "1024x1024"
    aspect_ratio: str = "1:1"
    format: str = "PNG"


class ImageSpec(BaseModel):
    prompt: str = ""
    negative_prompt: str = ""
    style: str = ""
    composition: str = ""
    colors: str = ""
    technical: TechnicalSpec = Field(default_factory=TechnicalSpec)


def parse_image_spec(response: str, original_prompt: str) -> ImageSpec:
    parsed = SPEC_SECTIONS.parse(response)
    spec = ImageSpec(
        prompt=strip_markdown(parsed.text("prompt")) or original_prompt,
        negative_prompt=strip_markdown(parsed.text("negative_prompt")),
        style=strip_markdown(parsed.text("style")),
        composition=strip_markdown(parsed.text("composition")),
        colors=strip_markdown(parsed.text("colors")),
    )

    technical = parsed.text("technical")
    resolution = RESOLUTION_RE.search(technical)
    if resolution:
        spec.technical.resolution = f"{resolution.group(1)}x{resolution.group(2)}"
    aspect = ASPECT_RE.search(technical)
    if aspect:
        spec.technical.aspect_ratio = aspect.group(1)
    return spec


class ImageGenAgent(BaseAgent):
    """Expands a short idea into a detailed image prompt, optionally rendering it."""

    slug = "image_gen_agent"
    name = "Image Designer"
    description = "Enhance an image prompt with style, composition and colour guidance"
    model = ModelConfig(provider="groq", model_name=GROQ_MODEL, temperature=0.6, max_tokens=800)
    failure_context = "Image specification generation failed"
    payload_keys = ("enhanced_prompt", "images")
    required_fields = {"prompt": "Image prompt is required"}

    def __init__(self, llm: Optional[LLMClient] = None, generator: Optional[ImageGenerator] = None):
        super().__init__(llm)
        self.generator = generator

    async def execute(self, input_data: Dict[str, Any]) -> Dict[str, Any]:
        prompt = input_data["prompt"]
        reference = input_data.get("reference_image")

        reference_note = ""
        if reference:
            reference_note = (
                "\nReference image context: the user has provided a reference image, so treat "
                "this as an editing or improvement task rather than pure generation."
            )
        response = await self.complete("image_gen", prompt=prompt, reference_note=reference_note)
        spec = parse_image_spec(response, prompt)

        images = []
        if self.generator is not None:
            size = spec.technical.resolution
            if size not in GENERATOR_SIZES:
                size = GENERATOR_SIZES[0]
            images = [image.model_dump() for image in await self.generator.generate(spec.prompt, size=size)]

        return {
            "enhanced_prompt": spec.model_dump(),
            "images": images,
            "status": "completed" if images else "spec_only",
            "prompt": prompt,
            "has_reference": bool(reference),
            "generated_at": datetime.now().isoformat(),
        }
