"""Speech services: transcription and text-to-speech."""
import logging
import uuid
from pathlib import Path
from typing import Optional, Protocol

from openai import AsyncOpenAI
from pydantic import BaseModel

from core.config import config
from core.exceptions import AgentInputError, ServiceError
from tools.text_input import file_size

logger = logging.getLogger(__name__)


def _openai_client() -> AsyncOpenAI:
    return AsyncOpenAI(api_key=config.providers.openai_api_key or None)


class Transcriber(Protocol):
    """Converts an audio file to text."""

    async def transcribe(self, audio_path: str) -> str:
        ...


class SpeechResult(BaseModel):
    audio_path: str
    format: str = "mp3"
    voice: str = "alloy"
    characters: int = 0


class SpeechSynthesizer(Protocol):
    """Converts text to an audio file."""

    async def synthesize(self, text: str, voice: str = "alloy", speed: float = 1.0) -> SpeechResult:
        ...


class WhisperTranscriber:
    """Transcribes audio with the OpenAI Whisper API."""

    def __init__(self, client: Optional[AsyncOpenAI] = None, model: str = "whisper-1"):
        self._client = client
        self.model = model

    async def transcribe(self, audio_path: str) -> str:
        client = self._client or _openai_client()
        try:
            with open(audio_path, "rb") as audio:
                result = await client.audio.transcriptions.create(model=self.model, file=audio)
        except Exception as e:
            raise ServiceError(f"Transcription failed: {e}") from e

        text = getattr(result, "text", result)
        if not isinstance(text, str) or not text.strip():
            raise ServiceError("Transcription returned no text")
        logger.debug("Transcribed %s (%d chars)", audio_path, len(text))
        return text.strip()


class OpenAISpeechSynthesizer:
    """Generates speech with the OpenAI TTS API and writes it under the output directory."""

    def __init__(
        self,
        client: Optional[AsyncOpenAI] = None,
        model: str = "tts-1",
        output_dir: Optional[str] = None,
    ):
        self._client = client
        self.model = model
        self.output_dir = Path(output_dir or config.agents.output_dir) / "speech"

    async def synthesize(self, text: str, voice: str = "alloy", speed: float = 1.0) -> SpeechResult:
        client = self._client or _openai_client()
        try:
            response = await client.audio.speech.create(
                model=self.model,
                voice=voice,
                input=text,
                speed=speed,
            )
        except Exception as e:
            raise ServiceError(f"Speech synthesis failed: {e}") from e

        self.output_dir.mkdir(parents=True, exist_ok=True)
        path = self.output_dir / f"speech_{uuid.uuid4().hex[:12]}.mp3"
        path.write_bytes(response.content)
        return SpeechResult(audio_path=str(path), voice=voice, characters=len(text))


def validate_audio_file(audio_file: str) -> None:
    """Raise AgentInputError unless `audio_file` exists and fits the upload limit."""
    if not Path(audio_file).is_file():
        raise AgentInputError("Audio file not found")
    if file_size(audio_file) > config.agents.max_audio_bytes:
        limit_mb = config.agents.max_audio_bytes // (1024 * 1024)
        raise AgentInputError(f"Audio file too large. Maximum size is {limit_mb}MB.")
