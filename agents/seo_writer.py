"""SEO blog post writer agent."""
import re
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field

from agents.base import GROQ_MODEL, BaseAgent, require_any
from core.config import ModelConfig
from tools.section_parser import find_labeled_value, parse_list_items, strip_markdown

HEADING_RE = re.compile(r"^(#{1,6})\s+(.+)$")
BOLD_HEADING_RE = re.compile(r"^\*\*([^*]+)\*\*:?$")
LABEL_LINE_RE = re.compile(r"^[*\s]*(seo title|title|meta description|h1)[*\s]*:", re.I)


class BlogSection(BaseModel):
    title: str
    content: str


class SEOContent(BaseModel):
    seo_title: str = ""
    meta_description: str = ""
    h1: str = ""
    introduction: str = ""
    sections: List[BlogSection] = Field(default_factory=list)
    conclusion: str = ""
    internal_links: List[str] = Field(default_factory=list)
    external_links: List[str] = Field(default_factory=list)
    word_count: int = 0
    keyword_density: float = 0.0


def keyword_density(text: str, keyword: str) -> float:
    """Keyword occurrences per hundred words, to two decimals."""
    words = text.lower().split()
    if not words or not keyword.strip():
        return 0.0
    hits = len(re.findall(re.escape(keyword.lower().strip()), text.lower()))
    return round(hits / len(words) * 100, 2)


def _split_chunks(response: str) -> Tuple[Optional[str], List[Tuple[str, List[str]]]]:
    """Return the H1 and (heading, lines) chunks for every lower-level heading."""
    h1 = None
    chunks: List[Tuple[str, List[str]]] = []
    for raw in response.splitlines():
        line = raw.strip()
        if not line or LABEL_LINE_RE.match(line):
            continue
        heading = HEADING_RE.match(line)
        if heading and len(heading.group(1)) == 1 and h1 is None:
            h1 = strip_markdown(heading.group(2))
            continue
        bold = BOLD_HEADING_RE.match(line)
        if heading or bold:
            title = strip_markdown(heading.group(2) if heading else bold.group(1))
            chunks.append((title, []))
        elif chunks:
            chunks[-1][1].append(line)
        else:
            chunks.append(("Introduction", [line]))
    return h1, chunks


def parse_seo_content(response: str, keyword: str) -> SEOContent:
    content = SEOContent(
        seo_title=find_labeled_value(response, "seo title", "title tag") or "",
        meta_description=find_labeled_value(response, "meta description") or "",
    )
    h1, chunks = _split_chunks(response)
    content.h1 = h1 or find_labeled_value(response, "h1") or ""

    for title, lines in chunks:
        lowered = title.lower()
        body = "\n".join(lines).strip()
        if "internal link" in lowered:
            content.internal_links = parse_list_items(body)
        elif "external link" in lowered:
            content.external_links = parse_list_items(body)
        elif "intro" in lowered and not content.introduction:
            content.introduction = body
        elif "conclusion" in lowered:
            content.conclusion = body
        elif body:
            content.sections.append(BlogSection(title=title, content=body))

    if not content.seo_title:
        content.seo_title = f"{keyword.title()}: A Complete Guide"[:60]
    if not content.meta_description:
        content.meta_description = f"Learn everything you need to know about {keyword}: key ideas, tips and best practices."[:160]
    if not content.h1:
        content.h1 = content.seo_title

    full_text = " ".join([content.introduction, content.conclusion, *(s.content for s in content.sections)])
    content.word_count = len(full_text.split())
    content.keyword_density = keyword_density(full_text, keyword)
    return content


class SEOWriterAgent(BaseAgent):
    """Drafts an SEO blog post around a keyword."""

    slug = "seo_writer"
    name = "SEO Writer"
    description = "SEO-optimized blog post with title, meta description, sections and link ideas"
    model = ModelConfig(provider="groq", model_name=GROQ_MODEL, temperature=0.7, max_tokens=3000)
    failure_context = "SEO content generation failed"
    payload_keys = ("content",)

    def validate(self, input_data: Dict[str, Any]) -> None:
        require_any(input_data, ("keyword", "topic"), "Keyword is required")

    async def execute(self, input_data: Dict[str, Any]) -> Dict[str, Any]:
        _, keyword = require_any(input_data, ("keyword", "topic"), "Keyword is required")
        extra = input_data.get("keywords") or []
        if isinstance(extra, str):
            extra = [part.strip() for part in extra.split(",") if part.strip()]
        secondary = f"\nAlso work in these secondary keywords: {', '.join(extra)}." if extra else ""

        response = await self.complete("seo_writer", keyword=keyword, secondary_keywords=secondary)

        return {
            "content": parse_seo_content(response, keyword).model_dump(),
            "keyword": keyword,
            "generated_at": datetime.now().isoformat(),
        }
