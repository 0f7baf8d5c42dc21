"""UX audit agent."""
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from agents.base import GROQ_MODEL, BaseAgent, require_any
from core.config import ModelConfig
from tools.section_parser import Section, SectionParser
from tools.text_input import looks_like_file

AUDIT_SECTIONS = SectionParser([
    Section("accessibility_issues", (("accessibility", "issue"), "wcag"), kind="list", min_item_length=5),
    Section("usability_issues", (("usability", "issue"), "heuristic"), kind="list", min_item_length=5),
    Section("design_issues", (("visual", "issue"), ("design", "issue")), kind="list", min_item_length=5),
    Section("performance_issues", (("technical", "issue"), ("performance", "issue")), kind="list", min_item_length=5),
    Section("recommendations", ("recommendation", "priority", "top 5"), kind="list", min_item_length=5),
], heading_max_words=6)
ISSUE_KEYS = ("accessibility_issues", "usability_issues", "design_issues", "performance_issues")

SEVERITY_RE = re.compile(r"^\[?(critical|high|medium|low)\]?\s*[:\-]\s*", re.I)
SCORE_RE = re.compile(r"(\d{1,3})\s*(?:/\s*100|%)")
NUMBER_RE = re.compile(r"\d{1,3}")
DEFAULT_SCORE = 70


class UXIssue(BaseModel):
    description: str
    severity: str = "Medium"
    category: str = "UX Issue"


class UXAuditReport(BaseModel):
    accessibility_issues: List[UXIssue] = Field(default_factory=list)
    usability_issues: List[UXIssue] = Field(default_factory=list)
    design_issues: List[UXIssue] = Field(default_factory=list)
    performance_issues: List[UXIssue] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    accessibility_score: int = DEFAULT_SCORE
    usability_score: int = DEFAULT_SCORE
    overall_score: int = DEFAULT_SCORE


def parse_issue(item: str, category: str) -> Optional[UXIssue]:
    severity = "Medium"
    match = SEVERITY_RE.match(item)
    if match:
        severity = match.group(1).capitalize()
        item = item[match.end():].strip()
    if len(item) < 10:
        return None
    return UXIssue(description=item, severity=severity, category=category)


def extract_score(line: str) -> Optional[int]:
    match = SCORE_RE.search(line)
    if match:
        value = int(match.group(1))
    else:
        numbers = NUMBER_RE.findall(line)
        if not numbers:
            return None
        value = int(numbers[-1])
    return value if 0 <= value <= 100 else None


def parse_ux_audit(response: str) -> UXAuditReport:
    parsed = AUDIT_SECTIONS.parse(response)
    report = UXAuditReport(recommendations=parsed.items("recommendations"))

    for key in ISSUE_KEYS:
        category = key.replace("_issues", "").capitalize()
        for item in parsed.items(key):
            issue = parse_issue(item, category)
            if issue is not None:
                getattr(report, key).append(issue)

    overall = None
    for line in response.splitlines():
        lowered = line.lower()
        if "score" not in lowered:
            continue
        score = extract_score(line)
        if score is None:
            continue
        if "accessibility" in lowered:
            report.accessibility_score = score
        elif "usability" in lowered:
            report.usability_score = score
        elif "overall" in lowered:
            overall = score

    report.overall_score = overall if overall is not None else round(
        (report.accessibility_score + report.usability_score) / 2
    )
    return report


def describe_target(target: str) -> str:
    if looks_like_file(target):
        return f"UI screenshot analysis for: {Path(target).name}"
    if target.startswith("http"):
        return f"Website URL analysis for: {target}"
    return target


class UXAuditAgent(BaseAgent):
    """Audits a described interface or URL for accessibility and usability problems."""

    slug = "ux_audit"
    name = "UX Auditor"
    description = "Accessibility, usability and design audit with scores and priority fixes"
    model = ModelConfig(provider="groq", model_name=GROQ_MODEL, temperature=0.2, max_tokens=2500)
    failure_context = "UX audit failed"
    payload_keys = ("audit",)

    def validate(self, input_data: Dict[str, Any]) -> None:
        require_any(input_data, ("url_or_description", "screenshot_or_url"), "Screenshot or URL is required")

    async def execute(self, input_data: Dict[str, Any]) -> Dict[str, Any]:
        _, target = require_any(
            input_data, ("url_or_description", "screenshot_or_url"), "Screenshot or URL is required"
        )
        audit_type = input_data.get("audit_type") or "comprehensive"

        response = await self.complete("ux_audit", description=describe_target(target), audit_type=audit_type)
        audit = parse_ux_audit(response)

        return {
            "audit": audit.model_dump(),
            "audit_type": audit_type,
            "recommendations_count": len(audit.recommendations),
            "accessibility_score": audit.accessibility_score,
            "usability_score": audit.usability_score,
            "analyzed_at": datetime.now().isoformat(),
        }
