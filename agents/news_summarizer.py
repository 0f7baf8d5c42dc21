"""Content summarizer agent."""
from datetime import datetime
from typing import Any, Dict

from agents.base import GROQ_MODEL, BaseAgent
from core.config import ModelConfig
from tools.documents import read_document
from tools.section_parser import Section, SectionParser, parse_list_items

SUMMARY_SECTIONS = SectionParser([
    Section("overview", ("executive summary", "overview", "summary")),
    Section("key_points", ("insight", "key point"), kind="list"),
    Section("takeaways", ("takeaway", "next step", "action"), kind="list"),
    Section("analysis", ("critical analysis", "implication"), kind="list", bullets_only=False),
    Section("perspectives", ("perspective", "future"), kind="list", bullets_only=False),
    Section("highlights", ("quantitative", "numbers", "statistic"), kind="list"),
])


def parse_summary_sections(response: str) -> Dict[str, Any]:
    parsed = SUMMARY_SECTIONS.parse(response)
    sections = parsed.as_dict()
    if not sections["overview"]:
        sections["overview"] = next(
            (line.strip() for line in response.splitlines() if len(line.strip()) > 40), response.strip()[:300]
        )
    return sections


class NewsSummarizerAgent(BaseAgent):
    """Summarizes articles or text files into an analytical markdown brief."""

    slug = "news_summarizer"
    name = "Content Summarizer"
    description = "Summarize an article or text file with insights and takeaways"
    model = ModelConfig(provider="groq", model_name=GROQ_MODEL, temperature=0.8, max_tokens=2000)
    failure_context = "Content summarization failed"
    payload_keys = ("summary", "sections")
    required_fields = {"text_or_file": "Text or file path is required"}

    async def execute(self, input_data: Dict[str, Any]) -> Dict[str, Any]:
        document = read_document(input_data["text_or_file"], allow_pdf=False)
        content = document.text

        summary = await self.complete("news_summarizer", content=content)
        sections = parse_summary_sections(summary)

        return {
            "summary": summary,
            "sections": sections,
            "metadata": {
                "source_file": document.file_name,
                "original_length": len(content),
                "insights_generated": len(parse_list_items(summary)),
            },
            "processed_at": datetime.now().isoformat(),
        }
