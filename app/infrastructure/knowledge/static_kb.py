from __future__ import annotations

import re
from difflib import SequenceMatcher

from app.application.ports.knowledge_base import RetrievalPort
from app.domain.entities.knowledge import KnowledgeSnippet
from app.infrastructure.knowledge.restaurant_docs import RESTAURANT_DOCS

_STOP_WORDS = {
    "a", "an", "and", "are", "at", "can", "do", "does", "for", "have", "how", "i",
    "in", "is", "it", "me", "of", "on", "or", "the", "to", "we", "what", "when",
    "where", "which", "you", "your",
}


class StaticKnowledgeBase(RetrievalPort):
    """
    In-process retrieval over bundled restaurant documents.
    Scores are the share of query terms found in a document (fuzzy per word),
    so they land on the same 0..1 scale as vector similarity.
    """

    def __init__(self, docs: dict[str, list[dict[str, str]]] | None = None) -> None:
        self._docs = RESTAURANT_DOCS if docs is None else docs

    def search(self, query: str, top_k: int, namespace: str) -> list[KnowledgeSnippet]:
        terms = _terms(query)
        if not terms:
            return []

        scored: list[KnowledgeSnippet] = []
        for doc in self._docs.get(namespace, []):
            doc_words = set(_terms(doc["text"]))
            hits = sum(1 for term in terms if _matches(term, doc_words))
            if hits:
                scored.append(
                    KnowledgeSnippet(
                        text=doc["text"],
                        score=round(hits / len(terms), 4),
                        namespace=namespace,
                        source=doc.get("id"),
                    )
                )

        scored.sort(key=lambda s: s.score, reverse=True)
        return scored[:top_k]


def _terms(text: str) -> list[str]:
    words = re.sub(r"[^a-z0-9\s]", " ", text.lower()).split()
    return [w for w in words if w not in _STOP_WORDS]


def _matches(term: str, doc_words: set[str]) -> bool:
    if term in doc_words:
        return True
    if len(term) < 4:
        return False
    return any(SequenceMatcher(None, term, word).ratio() >= 0.85 for word in doc_words)
