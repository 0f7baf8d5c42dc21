"""Knowledge base agent: ingest documents, answer questions from them."""
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from agents.base import GROQ_MODEL, BaseAgent, is_blank
from core.config import ModelConfig
from core.exceptions import AgentInputError
from core.llm import LLMClient
from tools.documents import read_document
from tools.knowledge_store import ChunkMatch, KnowledgeStore, detect_file_type

logger = logging.getLogger(__name__)

NO_MATCH_ANSWER = "I don't have enough information in the knowledge base to answer this question."


def calculate_confidence(matches: List[ChunkMatch]) -> float:
    if not matches:
        return 0
    average = sum(match.score for match in matches) / len(matches)
    return min(average * 100, 100)


class KnowledgeBaseAgent(BaseAgent):
    """Retrieval over an injected KnowledgeStore."""

    slug = "kb_agent"
    name = "Knowledge Base"
    description = "Ingest documents and answer questions from them"
    model = ModelConfig(provider="groq", model_name=GROQ_MODEL, temperature=0.2, max_tokens=800)
    failure_context = "Query processing failed"
    payload_keys = ("output",)

    def __init__(self, llm: Optional[LLMClient] = None, store: Optional[KnowledgeStore] = None):
        super().__init__(llm)
        self.store = store if store is not None else KnowledgeStore()

    def validate(self, input_data: Dict[str, Any]) -> None:
        if is_blank(input_data.get("documents")) and is_blank(input_data.get("query")):
            raise AgentInputError("Either documents for ingestion or a query is required")

    async def execute(self, input_data: Dict[str, Any]) -> Dict[str, Any]:
        documents = input_data.get("documents")
        if not is_blank(documents):
            if not isinstance(documents, list):
                documents = [documents]
            return {
                "operation": "ingestion",
                "output": self.ingest(documents),
                "processed_at": datetime.now().isoformat(),
            }

        return {
            "operation": "query",
            "output": await self.answer(input_data["query"]),
            "processed_at": datetime.now().isoformat(),
        }

    def ingest(self, documents: List[Any]) -> Dict[str, Any]:
        results = []
        for document in documents:
            try:
                content, metadata = self._load(document)
                stored = self.store.add_document(content, metadata)
                results.append({
                    "doc_id": stored.doc_id,
                    "filename": metadata.get("filename"),
                    "chunks_count": len(stored.chunks),
                    "total_tokens": len(content.split()),
                    "status": "ingested",
                })
            except Exception as e:
                logger.warning("Could not ingest %s: %s", document, e)
                results.append({"doc_path": str(document), "status": "failed", "error": str(e)})

        return {
            "total_documents": len(results),
            "successful_ingestions": sum(1 for result in results if result["status"] == "ingested"),
            "documents": results,
        }

    @staticmethod
    def _load(document: Any):
        if isinstance(document, dict):
            return str(document.get("content") or ""), {**document, "type": "structured"}

        path = Path(str(document))
        if not path.is_file():
            raise ValueError(f"File not found: {document}")
        text = read_document(str(path)).text
        return text, {
            "filename": path.name,
            "path": str(path),
            "size": path.stat().st_size,
            "type": detect_file_type(str(path)),
        }

    async def answer(self, query: str) -> Dict[str, Any]:
        matches = self.store.search(query)
        if not matches:
            return {"answer": NO_MATCH_ANSWER, "sources": [], "confidence": 0, "total_sources": 0}

        context = "\n\n".join(match.text for match in matches)
        answer = await self.complete("kb_agent", query=query, context=context)
        sources = [
            {
                "doc_id": match.doc_id,
                "filename": match.metadata.get("filename"),
                "chunk_index": match.index,
                "similarity_score": match.score,
                "text_preview": match.text[:200] + "...",
            }
            for match in matches
        ]
        return {
            "answer": answer.strip(),
            "sources": sources,
            "confidence": calculate_confidence(matches),
            "total_sources": len(sources),
        }
