from abc import ABC, abstractmethod

from app.domain.entities.knowledge import KnowledgeSnippet


class LLMPort(ABC):
    @abstractmethod
    def answer(
        self,
        question: str,
        snippets: list[KnowledgeSnippet],
        history: list[dict[str, str]],
    ) -> str:
        """
        Answer a guest question using only the retrieved restaurant snippets.

        Args:
            question: Latest guest utterance
            snippets: Retrieved context, highest score first
            history: Prior chat messages as {"role", "content"} dicts

        Returns:
            Reply text (never empty)

        Raises:
            LLMUpstreamError: networking/provider failures
            LLMContractError: empty or unusable completion
        """
        raise NotImplementedError
