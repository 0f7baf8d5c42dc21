"""Cold outreach agent."""
from typing import Any, Dict
from urllib.parse import urlparse

from agents.base import ReportAgent, is_blank
from core.config import ModelConfig
from core.exceptions import AgentInputError
from tools.section_parser import Section, SectionParser, strip_markdown

OUTREACH_SECTIONS = SectionParser([
    Section("subject_line", ("subject",)),
    Section("email_body", ("email body", "body"), kind="block"),
    Section("personalization_notes", ("why this email", "personalization")),
])


def company_name(company_url: str) -> str:
    """`https://www.acme.io/about` -> `acme.io`."""
    url = company_url if "//" in company_url else f"//{company_url}"
    host = urlparse(url).netloc or company_url
    host = host.lower()
    return host[4:] if host.startswith("www.") else host


def parse_outreach(response: str, company_url: str) -> Dict[str, str]:
    parsed = OUTREACH_SECTIONS.parse(response)
    subject = strip_markdown(parsed.text("subject_line").strip("[]"))
    body = parsed.text("email_body")
    return {
        "subject_line": subject or f"Quick idea for {company_name(company_url)}",
        "email_body": body or "\n".join(parsed.preamble) or response.strip(),
        "personalization_notes": parsed.text("personalization_notes"),
    }


class ColdOutreachAgent(ReportAgent):
    slug = "cold_outreach_agent"
    name = "Cold Outreach Writer"
    description = "Write a personalized cold email from a company URL and your offer"
    model = ModelConfig(provider="gemini", model_name="gemini-1.5-flash", temperature=0.7, max_tokens=800)
    failure_context = "Failed to generate outreach email"
    prompt_name = "cold_outreach"

    def validate(self, input_data: Dict[str, Any]) -> None:
        if is_blank(input_data.get("company_url")) or is_blank(input_data.get("offer")):
            raise AgentInputError("Please provide both company URL and your offer")

    def prompt_variables(self, context: Dict[str, Any]) -> Dict[str, Any]:
        return {"company_url": context["company_url"].strip(), "offer": context["offer"].strip()}

    def parse_sections(self, response: str, context: Dict[str, Any]) -> Dict[str, Any]:
        return parse_outreach(response, context["company_url"].strip())
