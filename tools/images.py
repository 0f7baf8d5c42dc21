"""Image services: vision descriptions and image generation."""
import base64
import logging
import mimetypes
from pathlib import Path
from typing import List, Optional, Protocol

from langchain_core.messages import HumanMessage
from langchain_openai import ChatOpenAI
from openai import AsyncOpenAI
from pydantic import BaseModel

from core.config import config
from core.exceptions import ServiceError
from core.llm import message_text

logger = logging.getLogger(__name__)

DESCRIBE_PROMPT = (
    "Describe this image in two or three sentences. Mention the main subject, "
    "the setting, notable colours and the overall mood."
)


class ImageDescriber(Protocol):
    """Turns an image file into a short text description."""

    async def describe(self, image_path: str) -> str:
        ...


class GeneratedImage(BaseModel):
    url: Optional[str] = None
    revised_prompt: Optional[str] = None
    size: str = "1024x1024"


class ImageGenerator(Protocol):
    """Renders images from a text prompt."""

    async def generate(self, prompt: str, size: str = "1024x1024", count: int = 1) -> List[GeneratedImage]:
        ...


def image_data_uri(path: Path) -> str:
    mime = mimetypes.guess_type(path.name)[0] or "image/png"
    encoded = base64.b64encode(path.read_bytes()).decode("ascii")
    return f"data:{mime};base64,{encoded}"


class VisionImageDescriber:
    """Describes images with an OpenAI vision model through ChatOpenAI."""

    def __init__(self, model: str = "gpt-4o-mini", chat_model: Optional[ChatOpenAI] = None):
        self.model = model
        self._chat_model = chat_model

    def _chat(self) -> ChatOpenAI:
        if self._chat_model is None:
            self._chat_model = ChatOpenAI(
                model=self.model,
                temperature=0.2,
                max_tokens=300,
                api_key=config.providers.openai_api_key or None,
            )
        return self._chat_model

    async def describe(self, image_path: str) -> str:
        path = Path(image_path)
        if not path.is_file():
            raise ServiceError(f"Image not found: {image_path}")

        message = HumanMessage(content=[
            {"type": "text", "text": DESCRIBE_PROMPT},
            {"type": "image_url", "image_url": {"url": image_data_uri(path)}},
        ])
        try:
            response = await self._chat().ainvoke([message])
        except Exception as e:
            raise ServiceError(f"Image description failed: {e}") from e

        description = message_text(response).strip()
        if not description:
            raise ServiceError("Image description was empty")
        return description


class OpenAIImageGenerator:
    """Generates images with the OpenAI Images API."""

    def __init__(self, client: Optional[AsyncOpenAI] = None, model: str = "dall-e-3"):
        self._client = client
        self.model = model

    async def generate(self, prompt: str, size: str = "1024x1024", count: int = 1) -> List[GeneratedImage]:
        client = self._client or AsyncOpenAI(api_key=config.providers.openai_api_key or None)
        try:
            response = await client.images.generate(model=self.model, prompt=prompt, size=size, n=count)
        except Exception as e:
            raise ServiceError(f"Image generation failed: {e}") from e

        images = [
            GeneratedImage(url=item.url, revised_prompt=getattr(item, "revised_prompt", None), size=size)
            for item in response.data
        ]
        logger.info("Generated %d image(s) with %s", len(images), self.model)
        return images
