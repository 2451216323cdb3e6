from dataclasses import dataclass


@dataclass(frozen=True)
class KnowledgeSnippet:
    text: str
    score: float
    namespace: str
    source: str | None = None
