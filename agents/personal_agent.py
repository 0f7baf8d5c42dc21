"""Personal assistant agent."""
import re
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from agents.base import GROQ_MODEL, BaseAgent, require_any
from core.config import ModelConfig
from core.llm import LLMClient
from tools.assistant_store import AssistantMemory
from tools.section_parser import BULLET_RE, strip_bullet, strip_heading, strip_markdown

LABEL_RE = re.compile(r"^(action|response|data|follow[\s_-]?up|suggestions?)\s*:\s*(.*)$", re.I)

ACTION_ALIASES = {
    "scheduling_meeting": "schedule_meeting",
    "creating_task": "create_task",
    "setting_reminder": "set_reminder",
    "taking_note": "create_note",
    "checking_calendar": "check_calendar",
    "sending_email": "draft_email",
}


class AssistantResponse(BaseModel):
    action: str = "general_assistance"
    message: str = ""
    data: Dict[str, str] = Field(default_factory=dict)
    follow_up: bool = False
    suggestions: List[str] = Field(default_factory=list)


def normalize_action(action: str) -> str:
    slug = re.sub(r"[^a-z_]+", "_", strip_markdown(action).lower()).strip("_")
    return ACTION_ALIASES.get(slug, slug) or "general_assistance"


def parse_assistant_response(response: str) -> AssistantResponse:
    parsed = AssistantResponse()
    section = ""
    message: List[str] = []

    for raw in response.splitlines():
        line = strip_markdown(strip_heading(raw))
        if not line:
            continue
        label = LABEL_RE.match(line)
        if label:
            section = label.group(1).lower().replace(" ", "").replace("-", "").replace("_", "")
            value = strip_markdown(label.group(2))
            if section == "action" and value:
                parsed.action = normalize_action(value)
            elif section == "response" and value:
                message.append(value)
            elif section == "followup":
                parsed.follow_up = value.lower().startswith(("true", "yes"))
            continue

        if section == "response":
            message.append(line)
        elif section == "data" and ":" in line:
            key, value = (strip_bullet(line) or line).split(":", 1)
            key = re.sub(r"\s+", "_", strip_markdown(key).lower())
            if key:
                parsed.data[key] = strip_markdown(value)
        elif section.startswith("suggestion") and BULLET_RE.match(line):
            parsed.suggestions.append(strip_markdown(strip_bullet(line)))

    parsed.message = " ".join(message) or response.strip()
    return parsed


class PersonalAgent(BaseAgent):
    """Interprets a request, then records meetings, tasks, reminders and notes."""

    slug = "personal_agent"
    name = "Personal Assistant"
    description = "Schedule meetings, track tasks, set reminders and take notes"
    model = ModelConfig(provider="groq", model_name=GROQ_MODEL, temperature=0.3, max_tokens=1500)
    failure_context = "Personal assistant query processing failed"
    payload_keys = ("response",)

    def __init__(self, llm: Optional[LLMClient] = None, memory: Optional[AssistantMemory] = None):
        super().__init__(llm)
        self.memory = memory if memory is not None else AssistantMemory()

    def validate(self, input_data: Dict[str, Any]) -> None:
        require_any(input_data, ("request", "query"), "Query is required")

    def execute_action(self, parsed: AssistantResponse, user_id: str) -> Optional[Dict[str, Any]]:
        """Apply the parsed action to memory; returns the stored record, if any."""
        action, data = parsed.action, parsed.data
        if action == "schedule_meeting":
            return self.memory.schedule_meeting(user_id, data).model_dump()
        if action == "create_task":
            return self.memory.create_task(user_id, data).model_dump()
        if action == "set_reminder":
            return self.memory.set_reminder(user_id, data).model_dump()
        if action == "create_note":
            return self.memory.create_note(user_id, data).model_dump()
        if action == "check_calendar":
            return self.memory.calendar(user_id)
        if action == "draft_email":
            return {
                "to": data.get("to", ""),
                "subject": data.get("subject", ""),
                "body": data.get("body", ""),
                "drafted_at": datetime.now().isoformat(),
            }
        return None

    async def execute(self, input_data: Dict[str, Any]) -> Dict[str, Any]:
        _, query = require_any(input_data, ("request", "query"), "Query is required")
        user_id = input_data.get("user_id") or "default"

        response = await self.complete("personal_agent", query=query, context=self.memory.summary(user_id))
        parsed = parse_assistant_response(response)

        executed = []
        record = self.execute_action(parsed, user_id)
        if record is not None:
            executed.append({"action": parsed.action, "result": record})

        return {
            "response": parsed.model_dump(),
            "executed_actions": executed,
            "user_id": user_id,
            "action_taken": parsed.action,
            "follow_up_needed": parsed.follow_up,
            "processed_at": datetime.now().isoformat(),
        }
