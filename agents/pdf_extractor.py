"""Document-to-JSON extraction agent."""
from datetime import datetime
from typing import Any, Dict, List

from agents.base import GROQ_MODEL, BaseAgent
from core.config import ModelConfig
from tools.documents import read_document
from tools.json_extraction import extract_json

MAX_KEY_POINTS = 10


def extract_title(text: str) -> str:
    """First line among the opening five that is a plausible title."""
    for line in text.split("\n")[:5]:
        candidate = line.strip()
        if 10 < len(candidate) < 100 and "http" not in candidate:
            return candidate
    return "Extracted Document"


def extract_key_points(text: str) -> List[str]:
    points = []
    for line in text.split("\n"):
        candidate = line.strip()
        if not 10 < len(candidate) < 200:
            continue
        if candidate.startswith(("-", "•")) or candidate[:1].isdigit() and "." in candidate[:4]:
            points.append(candidate.lstrip("-•0123456789. ").strip())
    return points[:MAX_KEY_POINTS]


def fallback_structure(response: str) -> Dict[str, Any]:
    return {
        "metadata": {
            "title": extract_title(response),
            "author": None,
            "date": None,
            "total_pages": 1,
            "language": "en",
        },
        "sections": [{
            "title": "Main Content",
            "content": response,
            "subsections": [],
            "page_number": 1,
        }],
        "tables": [],
        "key_points": extract_key_points(response),
        "entities": [],
        "summary": response[:200] + "...",
    }


def parse_structured_json(response: str) -> Dict[str, Any]:
    """The JSON object in the response, or a heuristic structure when there is none."""
    data = extract_json(response)
    if isinstance(data, dict):
        return data
    return fallback_structure(response)


class PDFExtractorAgent(BaseAgent):
    """Turns PDF or text documents into structured JSON."""

    slug = "pdf_extractor"
    name = "PDF Data Extractor"
    description = "Extract metadata, sections, tables, key points and entities from a document"
    model = ModelConfig(provider="groq", model_name=GROQ_MODEL, temperature=0.1, max_tokens=1500)
    failure_context = "PDF extraction failed"
    payload_keys = ("extracted_data",)
    required_fields = {"pdf_file": "PDF file path is required"}

    async def execute(self, input_data: Dict[str, Any]) -> Dict[str, Any]:
        document = read_document(input_data["pdf_file"])
        response = await self.complete("pdf_extractor", content=document.text)
        extracted = parse_structured_json(response)

        sections = extracted.get("sections")
        metadata = extracted.get("metadata") if isinstance(extracted.get("metadata"), dict) else {}
        total_pages = document.page_count
        if total_pages is None:
            reported = metadata.get("total_pages")
            total_pages = reported if isinstance(reported, int) else 1

        return {
            "extracted_data": extracted,
            "file_name": document.file_name or "inline_text",
            "extracted_at": datetime.now().isoformat(),
            "total_pages": total_pages,
            "total_sections": len(sections) if isinstance(sections, list) else 0,
        }
