"""SQL tutor agent."""
from datetime import datetime
from typing import Any, Dict, List

from pydantic import BaseModel, Field

from agents.base import GROQ_MODEL, BaseAgent
from core.config import ModelConfig
from tools.section_parser import Section, SectionParser

EXPLANATION_SECTIONS = SectionParser([
    Section("overview", ("what the query does", "overview")),
    Section("step_by_step", ("step-by-step", "step by step", "breakdown"), kind="list", min_item_length=5),
    Section("key_concepts", ("key concept",), kind="list", min_item_length=5),
    Section("performance_notes", ("performance", "optimization"), kind="list", min_item_length=5),
    Section("use_cases", ("use case",), kind="list", min_item_length=5),
    Section("alternatives", ("alternative",), kind="list", min_item_length=5),
])

LEVEL_GUIDANCE = {
    "beginner": "Use simple language and explain basic concepts.",
    "intermediate": "Assume basic SQL knowledge and focus on advanced concepts.",
}
EXPERT_GUIDANCE = "Give a deep technical analysis covering performance implications and edge cases."

DEFAULT_OVERVIEW = (
    "This SQL query performs operations on database tables to retrieve, manipulate, or analyze data."
)
DEFAULT_STEPS = [
    "Parse the query structure and identify main components",
    "Execute FROM clause to determine data sources",
    "Apply WHERE conditions to filter data",
    "Perform JOIN operations if specified",
    "Apply GROUP BY and aggregate functions",
    "Apply HAVING conditions to grouped data",
    "Sort results with ORDER BY",
    "Limit results with LIMIT/OFFSET",
]


class QueryExplanation(BaseModel):
    overview: str = DEFAULT_OVERVIEW
    step_by_step: List[str] = Field(default_factory=list)
    key_concepts: List[str] = Field(default_factory=list)
    performance_notes: List[str] = Field(default_factory=list)
    use_cases: List[str] = Field(default_factory=list)
    alternatives: List[str] = Field(default_factory=list)


def parse_explanation(response: str) -> QueryExplanation:
    parsed = EXPLANATION_SECTIONS.parse(response)
    return QueryExplanation(
        overview=parsed.text("overview", DEFAULT_OVERVIEW),
        step_by_step=parsed.items("step_by_step", DEFAULT_STEPS),
        key_concepts=parsed.items("key_concepts"),
        performance_notes=parsed.items("performance_notes"),
        use_cases=parsed.items("use_cases"),
        alternatives=parsed.items("alternatives"),
    )


class SQLTeacherAgent(BaseAgent):
    """Explains a SQL query at the learner's level."""

    slug = "sql_teacher"
    name = "SQL Teacher"
    description = "Explain a SQL query step by step for a chosen skill level"
    model = ModelConfig(provider="groq", model_name=GROQ_MODEL, temperature=0.2, max_tokens=1200)
    failure_context = "SQL explanation failed"
    payload_keys = ("explanation",)
    required_fields = {"sql_query": "SQL query is required"}

    async def execute(self, input_data: Dict[str, Any]) -> Dict[str, Any]:
        sql_query = input_data["sql_query"]
        skill_level = input_data.get("skill_level") or "intermediate"

        response = await self.complete(
            "sql_teacher",
            sql_query=sql_query,
            skill_level=skill_level,
            level_guidance=LEVEL_GUIDANCE.get(skill_level, EXPERT_GUIDANCE),
        )

        return {
            "explanation": parse_explanation(response).model_dump(),
            "skill_level": skill_level,
            "original_query": sql_query,
            "explained_at": datetime.now().isoformat(),
        }
