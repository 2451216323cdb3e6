from __future__ import annotations

import logging
from typing import Any

import httpx
from openai import OpenAI

from app.application.exceptions import RetrievalError
from app.application.ports.knowledge_base import RetrievalPort
from app.core.config import settings
from app.domain.entities.knowledge import KnowledgeSnippet


class PineconeRetriever(RetrievalPort):
    """Embeds the query with OpenAI and runs a namespaced query against a Pinecone index host."""

    def __init__(
        self,
        api_key: str | None = None,
        index_host: str | None = None,
        embedding_model: str | None = None,
        embeddings: OpenAI | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._api_key = api_key or settings.PINECONE_API_KEY
        host = index_host or settings.PINECONE_INDEX_HOST or ""
        self._index_url = host if host.startswith("http") else f"https://{host}"
        self._embedding_model = embedding_model or settings.OPENAI_EMBEDDING_MODEL
        self._embeddings = embeddings or OpenAI(api_key=settings.OPENAI_API_KEY, base_url=settings.OPENAI_BASE_URL)
        self._client = client or httpx.Client(timeout=10.0)
        self._logger = logging.getLogger(__name__)

        if not self._api_key:
            raise ValueError("PINECONE_API_KEY is required for Pinecone retrieval")
        if not host:
            raise ValueError("PINECONE_INDEX_HOST is required for Pinecone retrieval")

    def search(self, query: str, top_k: int, namespace: str) -> list[KnowledgeSnippet]:
        vector = self._embed(query)
        payload = {
            "namespace": namespace,
            "vector": vector,
            "topK": top_k,
            "includeMetadata": True,
        }
        headers = {"Api-Key": self._api_key, "Content-Type": "application/json"}

        try:
            response = self._client.post(f"{self._index_url.rstrip('/')}/query", json=payload, headers=headers)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            self._logger.error("Pinecone query failed", extra={"namespace": namespace, "error": str(e)})
            raise RetrievalError(f"Pinecone query failed: {e}") from e

        snippets: list[KnowledgeSnippet] = []
        for match in data.get("matches", []) or []:
            text = _match_text(match.get("metadata") or {})
            if not text:
                continue
            snippets.append(
                KnowledgeSnippet(
                    text=text,
                    score=float(match.get("score") or 0.0),
                    namespace=namespace,
                    source=match.get("id"),
                )
            )
        return snippets

    def _embed(self, text: str) -> list[float]:
        try:
            resp = self._embeddings.embeddings.create(model=self._embedding_model, input=text)
        except Exception as e:
            raise RetrievalError(f"Embedding request failed: {e}") from e
        if not resp.data:
            raise RetrievalError("Embedding response was empty")
        return list(resp.data[0].embedding)


def _match_text(metadata: dict[str, Any]) -> str:
    for key in ("chunk", "text", "content"):
        value = metadata.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ""
