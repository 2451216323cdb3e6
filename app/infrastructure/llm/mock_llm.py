from __future__ import annotations

from app.application.ports.llm import LLMPort
from app.domain.entities.knowledge import KnowledgeSnippet


class MockLLM(LLMPort):
    """Answers with the best snippet verbatim; used in dev and tests."""

    def __init__(self) -> None:
        self.calls: list[dict[str, object]] = []

    def answer(
        self,
        question: str,
        snippets: list[KnowledgeSnippet],
        history: list[dict[str, str]],
    ) -> str:
        self.calls.append({"question": question, "snippets": list(snippets), "history": list(history)})
        if not snippets:
            return "I don't have that specific information, but I'm happy to help with something else."
        return snippets[0].text.strip()
