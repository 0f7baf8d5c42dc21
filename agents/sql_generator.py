"""Natural-language to SQL agent."""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from agents.base import GROQ_MODEL, BaseAgent
from core.config import ModelConfig
from tools.section_parser import Section, SectionParser

SQL_VERBS = ("select", "insert", "update", "delete", "with")
DEFAULT_QUERY = "SELECT * FROM table_name; -- Query could not be generated"
DEFAULT_EXPLANATION = "This query retrieves data based on your question."

SQL_SECTIONS = SectionParser([
    Section("query", (("sql", "query"),), kind="block"),
    Section("explanation", ("explanation",)),
    Section("optimization_tips", ("optimization", "tips"), kind="list"),
    Section("assumptions", ("assumption",), kind="list"),
])


class SQLResult(BaseModel):
    query: str = DEFAULT_QUERY
    explanation: str = DEFAULT_EXPLANATION
    optimization_tips: List[str] = Field(default_factory=list)
    assumptions: List[str] = Field(default_factory=list)


def _statement_from_lines(lines: List[str], verbs=SQL_VERBS) -> Optional[str]:
    """First SQL statement in `lines`, running until a ';' or a blank line."""
    collected: List[str] = []
    for line in lines:
        stripped = line.strip()
        if not collected:
            if stripped.lower().split(" ", 1)[0] in verbs:
                collected.append(stripped)
                if stripped.endswith(";"):
                    break
            continue
        if not stripped:
            break
        collected.append(stripped)
        if stripped.endswith(";"):
            break
    return "\n".join(collected) if collected else None


def parse_sql_response(response: str) -> SQLResult:
    parsed = SQL_SECTIONS.parse(response)
    result = SQLResult(
        optimization_tips=parsed.items("optimization_tips"),
        assumptions=parsed.items("assumptions"),
    )

    query = parsed.code("sql") or parsed.code("")
    if not query:
        query = _statement_from_lines(parsed.values["query"])
    if not query:
        query = _statement_from_lines(response.splitlines(), SQL_VERBS[:4])
    if not query:
        query = next(
            (line.strip() for line in response.splitlines()
             if any(verb in line.lower() for verb in SQL_VERBS[:4])),
            None,
        )
    if query:
        result.query = query.strip()

    result.explanation = parsed.text("explanation", DEFAULT_EXPLANATION)
    return result


class SQLGeneratorAgent(BaseAgent):
    """Writes SQL for a question against a given schema."""

    slug = "sql_generator"
    name = "SQL Query Generator"
    description = "Generate SQL from a natural-language question and a schema"
    model = ModelConfig(provider="groq", model_name=GROQ_MODEL, temperature=0.1, max_tokens=1000)
    failure_context = "SQL query generation failed"
    payload_keys = ("query",)
    required_fields = {
        "question": "Question is required",
        "schema": "Database schema is required",
    }

    async def execute(self, input_data: Dict[str, Any]) -> Dict[str, Any]:
        database_type = input_data.get("database_type") or "postgresql"
        response = await self.complete(
            "sql_generator",
            question=input_data["question"],
            schema=input_data["schema"],
            database_type=database_type,
        )
        result = parse_sql_response(response)

        return {
            "query": result.query,
            "explanation": result.explanation,
            "optimization_tips": result.optimization_tips,
            "assumptions": result.assumptions,
            "database_type": database_type,
            "generated_at": datetime.now().isoformat(),
        }
