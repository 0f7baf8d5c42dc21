"""Email composer agent."""
import re
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel

from agents.base import GROQ_MODEL, BaseAgent, is_blank, require_any
from core.config import ModelConfig
from core.llm import LLMClient
from tools.mailer import Mailer
from tools.section_parser import find_labeled_value

BODY_HEADING_RE = re.compile(r"^[#*\s\d.]*(?:email\s+)?body[*\s]*:?[*\s]*(.*)$", re.I)
SUBJECT_LINE_RE = re.compile(r"^[#*\s\d.]*subject(?: line)?[*\s]*:", re.I)


class Email(BaseModel):
    subject: str
    body: str
    tone: str = "professional"
    purpose: str = ""


def subject_from_purpose(purpose: str) -> str:
    words = " ".join(purpose.split(" ")[:5])
    return f"Regarding: {words}{'...' if len(purpose) > 30 else ''}"


def parse_email(response: str, purpose: str, tone: str) -> Email:
    subject = find_labeled_value(response, "subject") or subject_from_purpose(purpose)

    lines = response.splitlines()
    body_lines = []
    for index, line in enumerate(lines):
        match = BODY_HEADING_RE.match(line.strip())
        if match and len(line.split()) <= 4:
            body_lines = ([match.group(1)] if match.group(1) else []) + lines[index + 1:]
            break
    if not body_lines:
        body_lines = [line for line in lines if not SUBJECT_LINE_RE.match(line.strip())]

    body = "\n".join(body_lines).strip() or response.strip()
    return Email(subject=subject, body=body, tone=tone, purpose=purpose)


class EmailGenAgent(BaseAgent):
    """Drafts an email and optionally sends it over SMTP."""

    slug = "email_gen"
    name = "Email Composer"
    description = "Draft an email for a purpose and tone, optionally sending it via SMTP"
    model = ModelConfig(provider="groq", model_name=GROQ_MODEL, temperature=0.5, max_tokens=800)
    failure_context = "Email generation failed"
    payload_keys = ("email",)

    def __init__(self, llm: Optional[LLMClient] = None, mailer: Optional[Mailer] = None):
        super().__init__(llm)
        self.mailer = mailer or Mailer()

    def validate(self, input_data: Dict[str, Any]) -> None:
        require_any(input_data, ("purpose", "prompt"), "Email purpose is required")

    async def execute(self, input_data: Dict[str, Any]) -> Dict[str, Any]:
        _, purpose = require_any(input_data, ("purpose", "prompt"), "Email purpose is required")
        tone = input_data.get("tone") or "professional"

        response = await self.complete("email_gen", purpose=purpose, tone=tone)
        email = parse_email(response, purpose, tone)

        result = {
            "email": email.model_dump(),
            "canSend": self.mailer.can_send(),
            "generated_at": datetime.now().isoformat(),
        }
        recipient = input_data.get("send_to")
        if not is_blank(recipient):
            sent = await self.mailer.send(recipient, email.subject, email.body)
            result["delivery"] = sent.model_dump()
        return result
