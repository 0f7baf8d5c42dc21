"""Research report agent."""
from datetime import datetime
from typing import Any, Dict, List

from pydantic import BaseModel, Field

from agents.base import GROQ_MODEL, BaseAgent, require_any
from core.config import ModelConfig
from tools.section_parser import Section, SectionParser

ANALYSIS_KEYWORDS = {
    "trends": ("trend", "development"),
    "statistics": ("statistic", "data point", "number"),
    "perspectives": ("perspective", "opinion", "expert"),
    "challenges": ("challenge", "opportunit", "risk"),
}

REPORT_SECTIONS = SectionParser([
    Section("executive_summary", ("executive summary",)),
    Section("background_context", ("background", "context")),
    Section("key_findings", ("key finding",), kind="list", min_item_length=5),
    Section("detailed_analysis", ("detailed analysis",), kind="list", min_item_length=5),
    *(
        Section(key, keywords, kind="list", min_item_length=5)
        for key, keywords in ANALYSIS_KEYWORDS.items()
    ),
    Section("sources_references", ("source", "reference"), kind="list", min_item_length=5),
    Section("future_outlook", ("future outlook", "outlook")),
    Section("recommendations", ("recommendation",), kind="list", min_item_length=5),
    Section("methodology", ("methodology",)),
])

DEPTH_GUIDANCE = {
    "brief": "Focus on key highlights and main conclusions.",
    "comprehensive": "Cover all aspects with detailed analysis.",
}
DETAILED_GUIDANCE = "Be extremely thorough with extensive details and multiple viewpoints."

DEFAULT_FINDINGS = [
    "Multiple perspectives and data sources were analyzed",
    "Key trends and patterns were identified",
    "Actionable insights and recommendations were developed",
]


class DetailedAnalysis(BaseModel):
    trends: List[str] = Field(default_factory=list)
    statistics: List[str] = Field(default_factory=list)
    perspectives: List[str] = Field(default_factory=list)
    challenges: List[str] = Field(default_factory=list)


class ResearchReport(BaseModel):
    executive_summary: str
    background_context: str = ""
    key_findings: List[str] = Field(default_factory=list)
    detailed_analysis: DetailedAnalysis = Field(default_factory=DetailedAnalysis)
    sources_references: List[str] = Field(default_factory=list)
    future_outlook: str = ""
    recommendations: List[str] = Field(default_factory=list)
    methodology: str = ""


def _route_analysis_items(items: List[str], analysis: DetailedAnalysis):
    """Sort "Trends: ..." style bullets into the matching sub-list."""
    current = "trends"
    for item in items:
        lowered = item.lower()
        for key, keywords in ANALYSIS_KEYWORDS.items():
            if any(keyword in lowered for keyword in keywords):
                current = key
                break
        getattr(analysis, current).append(item)


def parse_research_report(response: str, topic: str) -> ResearchReport:
    parsed = REPORT_SECTIONS.parse(response)
    analysis = DetailedAnalysis(**{key: parsed.items(key) for key in ANALYSIS_KEYWORDS})
    _route_analysis_items(parsed.items("detailed_analysis"), analysis)

    return ResearchReport(
        executive_summary=parsed.text("executive_summary") or (
            f"This research report provides a comprehensive analysis of {topic}, covering key "
            "findings, trends, and insights based on thorough investigation."
        ),
        background_context=parsed.text("background_context"),
        key_findings=parsed.items("key_findings", DEFAULT_FINDINGS),
        detailed_analysis=analysis,
        sources_references=parsed.items("sources_references"),
        future_outlook=parsed.text("future_outlook"),
        recommendations=parsed.items("recommendations"),
        methodology=parsed.text("methodology"),
    )


class ResearchAgent(BaseAgent):
    """Writes a structured research report on a topic."""

    slug = "research_agent"
    name = "Research Agent"
    description = "Structured research report with findings, analysis and recommendations"
    model = ModelConfig(provider="groq", model_name=GROQ_MODEL, temperature=0.3, max_tokens=2000)
    failure_context = "Research failed"
    payload_keys = ("report",)

    def validate(self, input_data: Dict[str, Any]) -> None:
        require_any(input_data, ("topic", "prompt"), "Research topic is required")

    async def execute(self, input_data: Dict[str, Any]) -> Dict[str, Any]:
        _, topic = require_any(input_data, ("topic", "prompt"), "Research topic is required")
        depth = input_data.get("depth") or "comprehensive"
        sources = input_data.get("sources") or 5

        response = await self.complete(
            "research_agent",
            topic=topic,
            depth=depth,
            sources=sources,
            depth_guidance=DEPTH_GUIDANCE.get(depth, DETAILED_GUIDANCE),
        )

        return {
            "report": parse_research_report(response, topic).model_dump(),
            "topic": topic,
            "depth": depth,
            "sources_analyzed": sources,
            "completed_at": datetime.now().isoformat(),
        }
