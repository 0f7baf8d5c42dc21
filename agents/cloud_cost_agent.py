"""Cloud cost agent: aggregate a billing export and ask for savings."""
import re
from typing import Any, Dict, Optional

from agents.base import ReportAgent, require
from core.config import ModelConfig
from core.exceptions import AgentInputError
from tools.billing import BillingSummary, summarize_billing
from tools.csv_profile import load_csv
from tools.section_parser import Section, SectionParser

COST_SECTIONS = SectionParser([
    Section("findings", ("finding", "observation", "waste"), kind="list"),
    Section("recommendations", ("recommendation",), kind="list"),
    Section("estimated_savings", (("estimated", "saving"), "potential saving")),
])
DOLLARS_RE = re.compile(r"\$\s?([\d,]+(?:\.\d+)?)")


def parse_savings_amount(text: str) -> Optional[float]:
    match = DOLLARS_RE.search(text or "")
    if not match:
        return None
    return float(match.group(1).replace(",", ""))


def parse_cost_report(response: str) -> Dict[str, Any]:
    parsed = COST_SECTIONS.parse(response)
    savings = parsed.text("estimated_savings")
    return {
        "findings": parsed.items("findings"),
        "recommendations": parsed.items("recommendations"),
        "estimated_savings": savings,
        "estimated_savings_amount": parse_savings_amount(savings),
    }


def format_breakdown(summary: BillingSummary) -> str:
    return "\n".join(
        f"- {service.service}: ${service.cost:,.2f} ({service.percentage}%)" for service in summary.services
    ) or "- No priced rows"


class CloudCostAgent(ReportAgent):
    """Spend is aggregated locally with pandas; the model only interprets it."""

    slug = "cloud_cost_agent"
    name = "Cloud Cost Auditor"
    description = "Analyze a cloud billing CSV and recommend savings"
    model = ModelConfig(provider="gemini", model_name="gemini-2.5-flash", temperature=0.2, max_tokens=2000)
    failure_context = "Failed to analyze billing data"
    prompt_name = "cloud_cost"
    required_fields = {"billing_file": "Please provide a billing CSV file"}

    def prepare(self, input_data: Dict[str, Any]) -> Dict[str, Any]:
        df = load_csv(require(input_data, "billing_file"))
        if df.empty:
            raise AgentInputError("Billing CSV is empty or could not be parsed")
        return {**input_data, "billing": summarize_billing(df)}

    def prompt_variables(self, context: Dict[str, Any]) -> Dict[str, Any]:
        summary: BillingSummary = context["billing"]
        return {
            "total_spend": f"${summary.total_spend:,.2f}",
            "row_count": summary.row_count,
            "service_breakdown": format_breakdown(summary),
            "top_items": "\n".join(
                f"- {item.service} {item.resource}: ${item.cost:,.2f}".replace("  ", " ")
                for item in summary.top_items
            ) or "- None",
        }

    def parse_sections(self, response: str, context: Dict[str, Any]) -> Dict[str, Any]:
        summary: BillingSummary = context["billing"]
        return {
            "total_spend": summary.total_spend,
            "services": [service.model_dump() for service in summary.services],
            "top_services": [service.model_dump() for service in summary.top_services],
            **parse_cost_report(response),
        }

    def render(self, response: str, sections: Dict[str, Any], context: Dict[str, Any]) -> str:
        summary: BillingSummary = context["billing"]
        top = "\n".join(
            f"- **{service.service}**: ${service.cost:,.2f} ({service.percentage}% of total)"
            for service in summary.top_services
        )
        return (
            "# Cloud Cost Analysis Report\n\n"
            f"Total spend: **${summary.total_spend:,.2f}** across {summary.row_count} line items\n\n"
            f"## Top Services\n{top}\n\n"
            f"{response}\n"
        )
