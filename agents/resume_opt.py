"""Resume optimizer agent."""
from datetime import datetime
from typing import Any, Dict, List

from pydantic import BaseModel, Field

from agents.base import GROQ_MODEL, BaseAgent, require, require_any
from core.config import ModelConfig
from tools.documents import read_document
from tools.section_parser import Section, SectionParser

RESUME_SECTIONS = SectionParser([
    Section("content", ("optimized resume", "final resume"), kind="block"),
    Section("ats_suggestions", ("ats",), kind="list", min_item_length=5),
    Section("keyword_analysis", ("keyword",), kind="list", min_item_length=5),
    Section("improvements", ("improvement",), kind="list", min_item_length=5),
])


class ResumeOptimization(BaseModel):
    content: str = ""
    ats_suggestions: List[str] = Field(default_factory=list)
    keyword_analysis: List[str] = Field(default_factory=list)
    improvements: List[str] = Field(default_factory=list)
    ats_score: int = 0


def ats_score(optimization: ResumeOptimization) -> int:
    score = 50
    upper = optimization.content.upper()
    if "SUMMARY" in upper or "EXPERIENCE" in upper:
        score += 15
    if len(optimization.content.splitlines()) < 50:
        score += 10
    if optimization.keyword_analysis:
        score += 15
    if optimization.ats_suggestions:
        score += 10
    return min(score, 100)


def parse_optimization(response: str, original_resume: str) -> ResumeOptimization:
    parsed = RESUME_SECTIONS.parse(response)
    content = parsed.code(section="content") or parsed.text("content")
    if not content and parsed.code_blocks:
        content = parsed.code_blocks[0].content

    optimization = ResumeOptimization(
        content=content.strip(),
        ats_suggestions=parsed.items("ats_suggestions"),
        keyword_analysis=parsed.items("keyword_analysis"),
        improvements=parsed.items("improvements"),
    )
    optimization.ats_score = ats_score(optimization)

    if not optimization.content:
        optimization.content = original_resume
        optimization.improvements.append("Unable to generate optimized content - using original")
    return optimization


class ResumeOptAgent(BaseAgent):
    """Tailors a resume to a job description for ATS screening."""

    slug = "resume_opt"
    name = "Resume Optimizer"
    description = "Rewrite a resume for a job description with ATS suggestions and a score"
    model = ModelConfig(provider="groq", model_name=GROQ_MODEL, temperature=0.3, max_tokens=2000)
    failure_context = "Resume optimization failed"
    payload_keys = ("optimized_resume",)

    def validate(self, input_data: Dict[str, Any]) -> None:
        require_any(input_data, ("resume_text", "resume_file"), "Resume file path is required")
        require(input_data, "job_description", "Job description is required")

    async def execute(self, input_data: Dict[str, Any]) -> Dict[str, Any]:
        _, resume_input = require_any(input_data, ("resume_text", "resume_file"), "Resume file path is required")
        resume = read_document(resume_input, allow_pdf=False).text

        response = await self.complete(
            "resume_opt", resume=resume, job_description=input_data["job_description"]
        )
        optimization = parse_optimization(response, resume)

        return {
            "optimized_resume": optimization.model_dump(),
            "original_length": len(resume),
            "optimized_length": len(optimization.content),
            "processed_at": datetime.now().isoformat(),
        }
