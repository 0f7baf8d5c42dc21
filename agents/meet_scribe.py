"""Meeting scribe: transcribe a recording and pull out summary, actions and decisions."""
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from agents.base import GROQ_MODEL, BaseAgent, is_blank
from core.config import ModelConfig
from core.exceptions import AgentInputError
from core.llm import LLMClient
from tools.section_parser import Section, SectionParser
from tools.speech import Transcriber, WhisperTranscriber, validate_audio_file

ACTION_ITEM_TARGET = 5
ACTION_ITEM_FILLER = "Additional follow-up needed"

MEETING_SECTIONS = SectionParser([
    Section("summary", ("summary",)),
    Section("action_items", ("action item",), kind="list", min_item_length=5),
    Section("decisions", ("decision",), kind="list", min_item_length=5),
    Section("follow_ups", ("follow", "question", "concern"), kind="list", min_item_length=5),
])


class MeetingAnalysis(BaseModel):
    summary: str = ""
    action_items: List[str] = Field(default_factory=list)
    decisions: List[str] = Field(default_factory=list)
    follow_ups: List[str] = Field(default_factory=list)


def parse_meeting_analysis(response: str) -> MeetingAnalysis:
    parsed = MEETING_SECTIONS.parse(response)
    analysis = MeetingAnalysis(
        summary=parsed.text("summary"),
        action_items=parsed.items("action_items"),
        decisions=parsed.items("decisions"),
        follow_ups=parsed.items("follow_ups"),
    )
    # Partial lists are topped up to the requested five; an empty list stays empty.
    while 0 < len(analysis.action_items) < ACTION_ITEM_TARGET:
        analysis.action_items.append(ACTION_ITEM_FILLER)
    return analysis


class MeetingScribeAgent(BaseAgent):
    """Summarises meetings from an audio recording or a ready transcript."""

    slug = "meet_scribe"
    name = "Meeting Scribe"
    description = "Transcribe a meeting and extract summary, action items, decisions and follow-ups"
    model = ModelConfig(provider="groq", model_name=GROQ_MODEL, temperature=0.3, max_tokens=1000)
    failure_context = "Meeting analysis failed"
    payload_keys = ("transcription", "analysis")

    def __init__(self, llm: Optional[LLMClient] = None, transcriber: Optional[Transcriber] = None):
        super().__init__(llm)
        self.transcriber = transcriber or WhisperTranscriber()

    def validate(self, input_data: Dict[str, Any]) -> None:
        if not is_blank(input_data.get("transcript")):
            return
        audio_file = input_data.get("audio_file")
        if is_blank(audio_file):
            raise AgentInputError("Audio file path is required")
        validate_audio_file(audio_file)

    async def execute(self, input_data: Dict[str, Any]) -> Dict[str, Any]:
        audio_file = input_data.get("audio_file")
        transcript = input_data.get("transcript")
        if is_blank(transcript):
            transcript = await self.transcriber.transcribe(audio_file)

        response = await self.complete("meet_scribe", transcript=transcript)
        analysis = parse_meeting_analysis(response)

        return {
            "transcription": transcript,
            "analysis": analysis.model_dump(),
            "audio_file": Path(audio_file).name if audio_file else None,
            "processed_at": datetime.now().isoformat(),
        }
