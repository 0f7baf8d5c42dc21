"""Financial report simplifier."""
from typing import Any, Dict, List

from agents.base import ReportAgent, require
from core.config import ModelConfig
from tools.documents import read_document
from tools.section_parser import Section, SectionParser

MAX_CONTENT_CHARS = 60000

REPORT_SECTIONS = SectionParser([
    Section("executive_summary", ("executive summary", "summary", "overview")),
    Section("highlights", ("highlight", "financial", "metric"), kind="list"),
    Section("developments", ("development", "announcement"), kind="list"),
    Section("risks", ("risk", "challenge"), kind="list"),
    Section("outlook", ("outlook", "guidance")),
])


def parse_metrics(highlights: List[str]) -> Dict[str, str]:
    """`Revenue: $4.2B (+12%)` items as a name -> value mapping."""
    metrics = {}
    for item in highlights:
        if ":" not in item:
            continue
        name, value = item.split(":", 1)
        if name.strip() and value.strip() and len(name.split()) <= 5:
            metrics[name.strip()] = value.strip()
    return metrics


def parse_financial_report(response: str) -> Dict[str, Any]:
    parsed = REPORT_SECTIONS.parse(response)
    highlights = parsed.items("highlights")
    summary = parsed.text("executive_summary")
    if not summary:
        paragraphs = [part.strip() for part in response.split("\n\n") if part.strip() and not part.startswith("#")]
        summary = paragraphs[0][:300] if paragraphs else ""
    return {
        "executive_summary": summary,
        "highlights": highlights,
        "metrics": parse_metrics(highlights),
        "developments": parsed.items("developments"),
        "risks": parsed.items("risks"),
        "outlook": parsed.text("outlook", default="No forward guidance identified."),
    }


class FinancialReportAgent(ReportAgent):
    """Accepts the report text, or a path to the PDF or text file."""

    slug = "financial_report_agent"
    name = "Financial Report Simplifier"
    description = "Summarize earnings reports and filings into key metrics, risks and outlook"
    model = ModelConfig(provider="gemini", model_name="gemini-2.5-flash", temperature=0.2, max_tokens=2000)
    failure_context = "Failed to analyze financial report"
    prompt_name = "financial_report"
    required_fields = {"pdf_content": "Please provide PDF content to analyze"}

    def prepare(self, input_data: Dict[str, Any]) -> Dict[str, Any]:
        document = read_document(require(input_data, "pdf_content"))
        return {"document": document}

    def prompt_variables(self, context: Dict[str, Any]) -> Dict[str, Any]:
        return {"pdf_content": context["document"].text[:MAX_CONTENT_CHARS]}

    def parse_sections(self, response: str, context: Dict[str, Any]) -> Dict[str, Any]:
        sections = parse_financial_report(response)
        document = context["document"]
        if document.is_file:
            sections["source"] = {"file_name": document.file_name, "page_count": document.page_count}
        return sections
