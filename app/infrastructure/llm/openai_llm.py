from __future__ import annotations

from openai import OpenAI

from app.application.exceptions import LLMContractError, LLMUpstreamError
from app.application.ports.llm import LLMPort
from app.core.config import settings
from app.domain.entities.knowledge import KnowledgeSnippet
from app.infrastructure.llm.prompts import build_answer_system_prompt

HISTORY_LIMIT = 10


class OpenAILLM(LLMPort):
    """
    OpenAI-backed adapter implementing LLMPort.

    Any OpenAI-compatible endpoint works (OPENAI_BASE_URL, e.g. OpenRouter).
    Raises:
        LLMUpstreamError: networking/provider failures
        LLMContractError: empty completion
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        temperature: float | None = None,
        restaurant_name: str | None = None,
    ) -> None:
        self.client = OpenAI(
            api_key=api_key or settings.OPENAI_API_KEY,
            base_url=base_url or settings.OPENAI_BASE_URL,
        )
        self._model = model or settings.OPENAI_MODEL_REPLY
        self._temperature = settings.OPENAI_TEMPERATURE_REPLY if temperature is None else temperature
        self._restaurant_name = restaurant_name or settings.RESTAURANT_NAME

    def answer(
        self,
        question: str,
        snippets: list[KnowledgeSnippet],
        history: list[dict[str, str]],
    ) -> str:
        system_content = build_answer_system_prompt(self._restaurant_name, [s.text for s in snippets])

        messages = [{"role": "system", "content": system_content}]
        for item in history[-HISTORY_LIMIT:]:
            role = item.get("role")
            content = item.get("content")
            if role in ("user", "assistant") and isinstance(content, str) and content.strip():
                messages.append({"role": role, "content": content})
        if not (messages[-1]["role"] == "user" and messages[-1]["content"] == question):
            messages.append({"role": "user", "content": question})

        return self._call_text(messages)

    def _call_text(self, messages: list[dict[str, str]]) -> str:
        try:
            resp = self.client.chat.completions.create(
                model=self._model,
                messages=messages,
                temperature=self._temperature,
                max_tokens=600,
            )
        except Exception as e:
            raise LLMUpstreamError(f"OpenAI API error: {e}") from e

        content = (resp.choices[0].message.content or "").strip() if resp.choices else ""
        if not content:
            raise LLMContractError("LLM returned empty response text.")

        return content
