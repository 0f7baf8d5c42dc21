"""Log anomaly agent: root cause analysis of server logs."""
import re
from collections import Counter
from typing import Any, Dict

from agents.base import ReportAgent, require
from core.config import ModelConfig
from tools.section_parser import Section, SectionParser, find_labeled_value
from tools.text_input import read_text_input

SEVERITIES = ("critical", "high", "medium", "low")
LEVEL_RE = re.compile(r"\b(FATAL|CRITICAL|ERROR|WARN(?:ING)?|INFO|DEBUG|TRACE)\b")
MAX_LOG_CHARS = 50000

LOG_SECTIONS = SectionParser([
    Section("secondary_issues", ("secondary",), kind="list"),
    Section("recommendations", ("recommendation", "monitoring", "alerting"), kind="list"),
])


def level_counts(log_text: str) -> Dict[str, int]:
    """Lines per log level; WARNING counts as WARN, FATAL as CRITICAL."""
    counts: Counter = Counter()
    for line in log_text.splitlines():
        match = LEVEL_RE.search(line)
        if not match:
            continue
        level = match.group(1)
        level = {"WARNING": "WARN", "FATAL": "CRITICAL"}.get(level, level)
        counts[level] += 1
    return dict(counts)


def normalize_severity(value: str) -> str:
    lowered = (value or "").lower()
    for severity in SEVERITIES:
        if severity in lowered:
            return severity.capitalize()
    return "Medium"


def parse_log_analysis(response: str) -> Dict[str, Any]:
    parsed = LOG_SECTIONS.parse(response)
    return {
        "primary_issue": find_labeled_value(response, "primary issue") or "No primary issue identified",
        "severity": normalize_severity(find_labeled_value(response, "severity") or ""),
        "location": find_labeled_value(response, "location") or "",
        "root_cause": find_labeled_value(response, "root cause") or "",
        "impact": find_labeled_value(response, "impact") or "",
        "fix": find_labeled_value(response, "fix", "solution") or "",
        "secondary_issues": parsed.items("secondary_issues"),
        "recommendations": parsed.items("recommendations"),
    }


class LogAnomalyAgent(ReportAgent):
    slug = "log_anomaly_agent"
    name = "Log Anomaly Detective"
    description = "Find error patterns and root causes in server logs"
    model = ModelConfig(provider="gemini", model_name="gemini-1.5-flash", temperature=0.2, max_tokens=2000)
    failure_context = "Failed to analyze logs"
    prompt_name = "log_anomaly"
    required_fields = {"log_text": "Please provide log text to analyze"}

    def prepare(self, input_data: Dict[str, Any]) -> Dict[str, Any]:
        log_text, _ = read_text_input(require(input_data, "log_text"))
        return {"log_text": log_text}

    def prompt_variables(self, context: Dict[str, Any]) -> Dict[str, Any]:
        # Keep the tail: the most recent lines carry the failure.
        return {"log_text": context["log_text"][-MAX_LOG_CHARS:]}

    def parse_sections(self, response: str, context: Dict[str, Any]) -> Dict[str, Any]:
        return {
            **parse_log_analysis(response),
            "line_count": len(context["log_text"].splitlines()),
            "level_counts": level_counts(context["log_text"]),
        }
