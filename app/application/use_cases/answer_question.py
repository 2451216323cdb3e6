from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

from app.application.exceptions import LLMContractError, LLMUpstreamError
from app.application.ports.knowledge_base import RetrievalPort
from app.application.ports.llm import LLMPort
from app.domain.entities.knowledge import KnowledgeSnippet

NAMESPACES = ("restaurant", "menu")

NO_INFORMATION_REPLY = (
    "I'm sorry, I couldn't find information about that. Could you please be more specific "
    "about what you'd like to know? I can also help you book a table."
)
UNAVAILABLE_REPLY = (
    "I'm sorry, I'm having trouble accessing our restaurant information right now. Please try again later."
)


@dataclass(frozen=True)
class AnswerResult:
    text: str
    snippets: list[KnowledgeSnippet]
    answered: bool


class AnswerQuestionUseCase:
    def __init__(
        self,
        retriever: RetrievalPort,
        llm: LLMPort,
        top_k: int = 3,
        score_threshold: float = 0.3,
        namespaces: tuple[str, ...] = NAMESPACES,
    ) -> None:
        self._retriever = retriever
        self._llm = llm
        self._top_k = top_k
        self._score_threshold = score_threshold
        self._namespaces = namespaces
        self._logger = logging.getLogger(__name__)

    def execute(self, question: str, history: list[dict[str, str]] | None = None) -> AnswerResult:
        snippets = self._retrieve(question)
        if not snippets:
            self._logger.info("No relevant snippets", extra={"reason": "below_threshold_or_empty"})
            return AnswerResult(text=NO_INFORMATION_REPLY, snippets=[], answered=False)

        try:
            text = self._llm.answer(question=question, snippets=snippets, history=list(history or []))
        except (LLMUpstreamError, LLMContractError) as e:
            self._logger.error("Answer generation failed", extra={"error": str(e)})
            return AnswerResult(text=UNAVAILABLE_REPLY, snippets=snippets, answered=False)

        return AnswerResult(text=text, snippets=snippets, answered=True)

    def _retrieve(self, question: str) -> list[KnowledgeSnippet]:
        """Query every namespace in parallel; a failing namespace contributes nothing."""
        with ThreadPoolExecutor(max_workers=len(self._namespaces)) as pool:
            futures = {
                namespace: pool.submit(self._retriever.search, question, self._top_k, namespace)
                for namespace in self._namespaces
            }
            results: list[KnowledgeSnippet] = []
            for namespace, future in futures.items():
                try:
                    results.extend(future.result())
                except Exception as e:
                    self._logger.warning(
                        "Retrieval failed for namespace",
                        extra={"namespace": namespace, "error": str(e)},
                    )

        relevant = [s for s in results if s.score >= self._score_threshold]
        relevant.sort(key=lambda s: s.score, reverse=True)

        unique: list[KnowledgeSnippet] = []
        seen: set[str] = set()
        for snippet in relevant:
            key = snippet.text.strip()
            if key and key not in seen:
                seen.add(key)
                unique.append(snippet)
        return unique
