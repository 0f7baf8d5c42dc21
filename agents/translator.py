"""Translation agent."""
import re
from datetime import datetime
from typing import Any, Dict, List

from pydantic import BaseModel, Field

from agents.base import GROQ_MODEL, BaseAgent
from core.config import ModelConfig
from tools.section_parser import Section, SectionParser, strip_markdown

SUPPORTED_LANGUAGES = [
    "english", "spanish", "french", "german", "italian", "portuguese",
    "russian", "chinese", "japanese", "korean", "arabic", "hindi",
    "dutch", "swedish", "danish", "norwegian", "finnish", "polish",
    "turkish", "greek", "hebrew", "thai", "vietnamese", "indonesian",
]

# Order matters: "Translation confidence" must land in confidence, not the text.
TRANSLATION_SECTIONS = SectionParser([
    Section("detected_language", (("detected", "language"), "source language")),
    Section("confidence", ("confidence",)),
    Section("cultural_notes", ("cultural", "context"), kind="list"),
    Section("alternatives", ("alternative",), kind="list"),
    Section("translated_text", ("translated text", "translation"), kind="block"),
])


class Translation(BaseModel):
    translated_text: str = ""
    detected_language: str = "en"
    confidence: str = "high"
    cultural_notes: List[str] = Field(default_factory=list)
    alternatives: List[str] = Field(default_factory=list)


def parse_translation(response: str, target_language: str) -> Translation:
    """Turn the model's free-text answer into a Translation."""
    parsed = TRANSLATION_SECTIONS.parse(response)
    translation = Translation(
        cultural_notes=parsed.items("cultural_notes"),
        alternatives=parsed.items("alternatives"),
    )

    language = re.search(r"[A-Za-z][A-Za-z-]*", parsed.text("detected_language"))
    if language:
        translation.detected_language = language.group(0).lower()

    confidence = re.search(r"\b(high|medium|low)\b", parsed.text("confidence"), re.I)
    if confidence:
        translation.confidence = confidence.group(1).lower()

    translation.translated_text = strip_markdown(parsed.text("translated_text"))
    if not translation.translated_text:
        translation.translated_text = _fallback_text(response, target_language)
    return translation


def _fallback_text(response: str, target_language: str) -> str:
    for paragraph in (response or "").split("\n\n"):
        lowered = paragraph.lower()
        if len(paragraph.strip()) > 20 and not any(
            word in lowered for word in ("translate", "language", "confidence")
        ):
            return paragraph.strip()
    first_line = (response or "").split("\n")[0].strip()
    return first_line or f"Translation to {target_language}"


class TranslatorAgent(BaseAgent):
    """Translates text between languages with cultural notes."""

    slug = "translator"
    name = "Language Translator"
    description = "Translate text into another language, with cultural notes and alternatives"
    model = ModelConfig(provider="groq", model_name=GROQ_MODEL, temperature=0.1, max_tokens=1200)
    failure_context = "Translation failed"
    payload_keys = ("translation",)
    required_fields = {
        "text": "Text to translate is required",
        "target_language": "Target language is required",
    }

    @staticmethod
    def supported_languages() -> List[str]:
        return list(SUPPORTED_LANGUAGES)

    async def execute(self, input_data: Dict[str, Any]) -> Dict[str, Any]:
        text = input_data["text"]
        target_language = input_data["target_language"]
        source_language = input_data.get("source_language") or "auto"
        preserve_formatting = input_data.get("preserve_formatting", True)

        response = await self.complete(
            "translator",
            text=text,
            target_language=target_language,
            source_language=source_language,
            formatting_instruction=(
                "PRESERVE FORMATTING: Keep the structure, line breaks, bullet points, and formatting intact."
                if preserve_formatting else ""
            ),
        )
        translation = parse_translation(response, target_language)

        return {
            "translation": translation.model_dump(),
            "source_text": text,
            "source_language": translation.detected_language if source_language == "auto" else source_language,
            "target_language": target_language,
            "preserve_formatting": preserve_formatting,
            "translated_at": datetime.now().isoformat(),
        }
