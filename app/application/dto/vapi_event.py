from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class FunctionInvocation:
    name: str
    arguments: Any
    call_id: str | None = None


class VapiMessageDTO(BaseModel):
    """The `message` object of a voice platform server event."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    type: str = ""
    function_call: dict[str, Any] | None = Field(
        default=None,
        validation_alias=AliasChoices("functionCall", "function_call"),
    )
    tool_calls: list[dict[str, Any]] = Field(
        default_factory=list,
        validation_alias=AliasChoices("toolCallList", "toolCalls"),
    )
    role: str | None = None
    transcript: str | None = None
    transcript_type: str | None = Field(default=None, alias="transcriptType")
    status: str | None = None

    def extract_function_call(self) -> FunctionInvocation | None:
        if not self.function_call:
            return None
        name = self.function_call.get("name")
        if not isinstance(name, str) or not name:
            return None
        return FunctionInvocation(name=name, arguments=self.function_call.get("parameters"))

    def extract_tool_calls(self) -> list[FunctionInvocation]:
        invocations: list[FunctionInvocation] = []
        for call in self.tool_calls or []:
            if not isinstance(call, dict):
                continue
            function = call.get("function") or {}
            name = function.get("name") if isinstance(function, dict) else None
            if not isinstance(name, str) or not name:
                continue
            invocations.append(
                FunctionInvocation(
                    name=name,
                    arguments=function.get("arguments"),
                    call_id=str(call.get("id") or ""),
                )
            )
        return invocations

    def final_user_transcript(self) -> str | None:
        if not self.transcript or not self.transcript.strip():
            return None
        if self.role not in (None, "user"):
            return None
        if self.transcript_type not in (None, "final"):
            return None
        return self.transcript


class VapiEventDTO(BaseModel):
    model_config = ConfigDict(extra="ignore")

    message: VapiMessageDTO | None = None
