"""Code review and bug-fix agent."""
from datetime import datetime
from typing import Any, Dict, List

from pydantic import BaseModel, Field

from agents.base import GROQ_MODEL, BaseAgent
from core.config import ModelConfig
from tools.section_parser import Section, SectionParser
from tools.text_input import detect_code_language, read_text_input

NO_FIX = "No specific fix suggested"

ANALYSIS_SECTIONS = SectionParser([
    Section("bugs", (("bug", "detect"),), kind="list", min_item_length=10, bullets_only=False),
    Section("quality", ("code quality", "improvement"), kind="list", min_item_length=10, bullets_only=False),
    Section("practices", ("best practice", "recommendation"), kind="list", min_item_length=10, bullets_only=False),
    Section("fix", ("minimal fix", "corrected"), kind="block"),
])


class CodeAnalysis(BaseModel):
    issues_found: bool = False
    bugs: List[str] = Field(default_factory=list)
    quality_suggestions: List[str] = Field(default_factory=list)
    best_practices: List[str] = Field(default_factory=list)
    suggested_fix: str = NO_FIX
    severity: str = "low"


def calculate_severity(bugs: List[str]) -> str:
    lowered = [bug.lower() for bug in bugs]
    if any("error" in bug or "crash" in bug for bug in lowered):
        return "high"
    if any("warning" in bug or "potential" in bug for bug in lowered):
        return "medium"
    return "low"


def parse_code_analysis(response: str) -> CodeAnalysis:
    parsed = ANALYSIS_SECTIONS.parse(response)
    bugs = parsed.items("bugs")
    fix = parsed.code(section="fix") or parsed.text("fix")
    return CodeAnalysis(
        issues_found=bool(bugs),
        bugs=bugs,
        quality_suggestions=parsed.items("quality"),
        best_practices=parsed.items("practices"),
        suggested_fix=fix.strip() or NO_FIX,
        severity=calculate_severity(bugs),
    )


class CodeFixAgent(BaseAgent):
    """Finds bugs and suggests minimal fixes for a snippet or a source file."""

    slug = "code_fix_agent"
    name = "Code Fix Assistant"
    description = "Detect bugs, suggest quality improvements and propose a minimal fix"
    model = ModelConfig(provider="groq", model_name=GROQ_MODEL, temperature=0.2, max_tokens=1500)
    failure_context = "Code analysis failed"
    payload_keys = ("analysis",)
    required_fields = {"code_snippet": "Code snippet is required"}

    async def execute(self, input_data: Dict[str, Any]) -> Dict[str, Any]:
        code, path = read_text_input(input_data["code_snippet"])
        language = detect_code_language(code, str(path) if path else None)

        response = await self.complete("code_fix", code=code, language=language)
        analysis = parse_code_analysis(response)

        return {
            "analysis": analysis.model_dump(),
            "language": language,
            "code_length": len(code),
            "processed_at": datetime.now().isoformat(),
        }
