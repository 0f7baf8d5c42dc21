"""In-memory document store for the knowledge base agent.

Similarity is word overlap between the query and each chunk, not vector
search. The hashed bag-of-words embeddings are kept per chunk so a real
vector index can be dropped in later without changing the ingestion path.
"""
import hashlib
import math
import time
import uuid
from collections import OrderedDict
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from core.config import config

EMBEDDING_DIMENSIONS = 384

FILE_TYPES = {
    ".pdf": "PDF",
    ".docx": "Word Document",
    ".txt": "Text File",
    ".md": "Markdown",
    ".html": "HTML",
    ".json": "JSON",
}


def detect_file_type(path: str) -> str:
    return FILE_TYPES.get(Path(path).suffix.lower(), "Unknown")


def chunk_text(text: str, chunk_size: int = 1000) -> List[str]:
    """Split text into chunks of `chunk_size` words."""
    words = text.split()
    return [" ".join(words[i:i + chunk_size]) for i in range(0, len(words), chunk_size)]


def embed_text(text: str, dimensions: int = EMBEDDING_DIMENSIONS) -> List[float]:
    """Deterministic hashed bag-of-words vector, L2-normalised."""
    vector = [0.0] * dimensions
    for word in text.lower().split():
        digest = hashlib.md5(word.encode("utf-8")).digest()
        index = int.from_bytes(digest[:4], "little") % dimensions
        vector[index] += 1.0 if digest[4] % 2 == 0 else -1.0
    norm = math.sqrt(sum(value * value for value in vector))
    return [value / norm for value in vector] if norm else vector


def word_overlap(query: str, text: str) -> float:
    """Share of query words that appear in (or contain) some word of the text."""
    query_words = query.lower().split()
    text_words = text.lower().split()
    common = [
        word for word in query_words
        if any(word in text_word or text_word in word for text_word in text_words)
    ]
    return len(common) / max(len(query_words), 1)


class StoredDocument(BaseModel):
    doc_id: str
    content: str
    chunks: List[str]
    metadata: Dict[str, Any] = Field(default_factory=dict)
    embeddings: List[List[float]] = Field(default_factory=list)


class ChunkMatch(BaseModel):
    doc_id: str
    index: int
    text: str
    score: float
    metadata: Dict[str, Any] = Field(default_factory=dict)


class KnowledgeStore:
    """Documents keyed by id, in insertion order.

    With `max_documents` set, adding past the cap evicts the oldest
    documents. Without it the store grows for the life of the process.
    Nothing here is locked against concurrent writers.
    """

    def __init__(self, chunk_size: Optional[int] = None, max_documents: Optional[int] = None):
        self.chunk_size = chunk_size or config.knowledge_base.chunk_size
        self.max_documents = max_documents if max_documents is not None else config.knowledge_base.max_documents
        self._documents: "OrderedDict[str, StoredDocument]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._documents)

    def get(self, doc_id: str) -> Optional[StoredDocument]:
        return self._documents.get(doc_id)

    def add_document(self, content: str, metadata: Optional[Dict[str, Any]] = None) -> StoredDocument:
        chunks = chunk_text(content, self.chunk_size)
        document = StoredDocument(
            doc_id=f"doc_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}",
            content=content,
            chunks=chunks,
            metadata=metadata or {},
            embeddings=[embed_text(chunk) for chunk in chunks],
        )
        self._documents[document.doc_id] = document
        if self.max_documents is not None:
            while len(self._documents) > self.max_documents:
                self._documents.popitem(last=False)
        return document

    def search(self, query: str, top_k: Optional[int] = None, threshold: Optional[float] = None) -> List[ChunkMatch]:
        top_k = top_k or config.knowledge_base.top_k
        threshold = config.knowledge_base.similarity_threshold if threshold is None else threshold

        matches = []
        for doc_id, document in self._documents.items():
            for index, chunk in enumerate(document.chunks):
                score = word_overlap(query, chunk)
                if score > threshold:
                    matches.append(ChunkMatch(
                        doc_id=doc_id,
                        index=index,
                        text=chunk,
                        score=score,
                        metadata=document.metadata,
                    ))

        matches.sort(key=lambda match: match.score, reverse=True)
        return matches[:top_k]

    def clear(self) -> None:
        self._documents.clear()
