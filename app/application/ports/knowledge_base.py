from abc import ABC, abstractmethod

from app.domain.entities.knowledge import KnowledgeSnippet


class RetrievalPort(ABC):
    @abstractmethod
    def search(self, query: str, top_k: int, namespace: str) -> list[KnowledgeSnippet]:
        """
        Return up to top_k scored snippets from one namespace.
        Scores are not filtered here; callers apply their own threshold.
        Raises RetrievalError when the backend is unreachable.
        """
        raise NotImplementedError
