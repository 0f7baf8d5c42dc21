"""Contract auditor agent."""
import re
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from agents.base import ReportAgent
from core.config import ModelConfig
from tools.section_parser import Section, SectionParser, find_labeled_value, strip_heading, strip_markdown

ASSESSMENTS = ("problematic", "concerning", "fair")
RISK_LEVELS = ("high", "medium", "low")

CONTRACT_SECTIONS = SectionParser([
    Section("flagged_clauses", ("flagged", "clause"), kind="list"),
    Section("missing_protections", ("missing",), kind="list"),
    Section("positive_aspects", ("positive", "standard terms"), kind="list"),
    Section("recommendations", ("recommendation", "negotiation", "priorit"), kind="list"),
])

# "Indemnification (High risk): unlimited liability ..." or "Indemnification - High: ..."
CLAUSE_ITEM_RE = re.compile(
    r"^(?P<clause>[^:(]+?)\s*(?:\((?P<paren>[^)]*)\)|[-–]\s*(?P<dash>high|medium|low)\b[^:]*)?\s*:\s*(?P<issue>.+)$",
    re.I,
)


class FlaggedClause(BaseModel):
    clause: str
    risk_level: str = "medium"
    issue: str = ""
    recommendation: str = ""


def _risk(text: Optional[str]) -> Optional[str]:
    lowered = (text or "").lower()
    for level in RISK_LEVELS:
        if level in lowered:
            return level
    return None


def parse_clause_item(item: str) -> FlaggedClause:
    match = CLAUSE_ITEM_RE.match(item)
    if not match:
        return FlaggedClause(clause=item[:80], risk_level=_risk(item) or "medium", issue=item)
    risk = _risk(match.group("paren") or match.group("dash")) or _risk(match.group("issue")) or "medium"
    return FlaggedClause(clause=match.group("clause").strip(), risk_level=risk, issue=match.group("issue").strip())


def parse_clause_blocks(response: str) -> List[FlaggedClause]:
    """`#### Clause` headings followed by **Issue:** / **Risk Level:** / **Recommendation:** lines."""
    clauses: List[FlaggedClause] = []
    current: Optional[FlaggedClause] = None
    for raw in response.splitlines():
        line = raw.strip()
        if line.startswith("####"):
            current = FlaggedClause(clause=strip_markdown(strip_heading(line)))
            clauses.append(current)
            continue
        if line.startswith("#"):
            current = None
            continue
        if current is None or ":" not in line:
            continue
        label, value = line.lstrip("-* ").split(":", 1)
        label = strip_markdown(label).lower()
        value = strip_markdown(value)
        if "issue" in label or "problem" in label:
            current.issue = value
        elif "risk" in label:
            current.risk_level = _risk(value) or current.risk_level
        elif "recommend" in label:
            current.recommendation = value
    return clauses


def overall_assessment(response: str) -> str:
    value = find_labeled_value(response, "overall assessment", "assessment", "fairness") or ""
    for candidate in (value.lower(), response.lower()):
        for assessment in ASSESSMENTS:
            if assessment in candidate:
                return assessment.capitalize()
    return "Concerning"


def contract_risk_level(assessment: str, clauses: List[FlaggedClause]) -> str:
    levels = {clause.risk_level for clause in clauses}
    if assessment == "Problematic" or "high" in levels:
        return "high"
    if assessment == "Concerning" or "medium" in levels:
        return "medium"
    return "low"


def parse_contract_audit(response: str) -> Dict[str, Any]:
    parsed = CONTRACT_SECTIONS.parse(response)
    clauses = [parse_clause_item(item) for item in parsed.items("flagged_clauses")] or parse_clause_blocks(response)
    assessment = overall_assessment(response)
    return {
        "overall_assessment": assessment,
        "risk_level": contract_risk_level(assessment, clauses),
        "flagged_clauses": [clause.model_dump() for clause in clauses],
        "missing_protections": parsed.items("missing_protections"),
        "positive_aspects": parsed.items("positive_aspects"),
        "recommendations": parsed.items(
            "recommendations", default=[clause.recommendation for clause in clauses if clause.recommendation]
        ),
    }


class ContractAuditorAgent(ReportAgent):
    slug = "contract_auditor"
    name = "Legal Contract Auditor"
    description = "Flag unfair or risky clauses in a contract and suggest negotiation points"
    model = ModelConfig(provider="gemini", model_name="gemini-1.5-flash", temperature=0.2, max_tokens=3000)
    failure_context = "Failed to audit contract"
    prompt_name = "contract_auditor"
    required_fields = {"contract_content": "Please provide contract content to analyze"}

    def prompt_variables(self, context: Dict[str, Any]) -> Dict[str, Any]:
        return {"contract_content": context["contract_content"]}

    def parse_sections(self, response: str, context: Dict[str, Any]) -> Dict[str, Any]:
        return parse_contract_audit(response)
