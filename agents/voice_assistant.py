"""Voice assistant agent: speech in, spoken reply out."""
from datetime import datetime
from typing import Any, Dict, Optional

from agents.base import GROQ_MODEL, BaseAgent, is_blank, require_any
from core.config import ModelConfig, config
from core.llm import LLMClient
from tools.section_parser import strip_markdown
from tools.speech import (
    OpenAISpeechSynthesizer,
    SpeechSynthesizer,
    Transcriber,
    WhisperTranscriber,
    validate_audio_file,
)

VOICES = {
    "neutral": "alloy",
    "female": "nova",
    "male": "onyx",
    "young": "shimmer",
    "mature": "fable",
}
SUPPORTED_LANGUAGES = ["en", "es", "fr", "de", "it", "pt", "ru", "zh", "ja", "ko", "ar", "hi"]


def supported_voices():
    return [{"id": voice_id, "voice": voice} for voice_id, voice in VOICES.items()]


class VoiceAssistantAgent(BaseAgent):
    """Answers a spoken or typed query and optionally speaks the answer."""

    slug = "voice_assistant"
    name = "Voice Assistant"
    description = "Conversational assistant with speech-to-text and text-to-speech"
    model = ModelConfig(provider="groq", model_name=GROQ_MODEL, temperature=0.6, max_tokens=200)
    failure_context = "Voice processing failed"
    payload_keys = ("response",)

    def __init__(
        self,
        llm: Optional[LLMClient] = None,
        transcriber: Optional[Transcriber] = None,
        synthesizer: Optional[SpeechSynthesizer] = None,
    ):
        super().__init__(llm)
        self.transcriber = transcriber or WhisperTranscriber()
        if synthesizer is None and config.providers.openai_api_key:
            synthesizer = OpenAISpeechSynthesizer()
        self.synthesizer = synthesizer

    def validate(self, input_data: Dict[str, Any]) -> None:
        field, value = require_any(
            input_data, ("audio_file", "user_query", "text"), "Either audio file or text query is required"
        )
        if field == "audio_file":
            validate_audio_file(value)

    async def execute(self, input_data: Dict[str, Any]) -> Dict[str, Any]:
        audio_file = input_data.get("audio_file")
        settings = dict(input_data.get("voice_settings") or {})

        if not is_blank(audio_file):
            query = await self.transcriber.transcribe(audio_file)
        else:
            _, query = require_any(input_data, ("user_query", "text"), "Either audio file or text query is required")

        reply = strip_markdown(await self.complete("voice_assistant", query=query))

        audio = None
        if settings.get("generate_voice") is not False and self.synthesizer is not None:
            voice = VOICES.get(settings.get("voice", "neutral"), settings.get("voice") or "alloy")
            speech = await self.synthesizer.synthesize(reply, voice=voice, speed=float(settings.get("speed") or 1.0))
            audio = speech.model_dump()

        return {
            "response": {
                "original_query": query,
                "text_response": reply,
                "audio": audio,
                "voice_settings_used": settings,
            },
            "transcript": query if not is_blank(audio_file) else None,
            "input_type": "audio" if not is_blank(audio_file) else "text",
            "response_type": "voice" if audio else "text",
            "processed_at": datetime.now().isoformat(),
        }
