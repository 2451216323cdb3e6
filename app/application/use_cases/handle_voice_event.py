from __future__ import annotations

import json
import logging
import re
from datetime import datetime
from typing import Any
from zoneinfo import ZoneInfo

from app.application.dto.vapi_event import FunctionInvocation, VapiMessageDTO
from app.application.use_cases.answer_question import AnswerQuestionUseCase
from app.application.use_cases.handle_turn import HandleTurnUseCase
from app.application.use_cases.reply_composer import ReplyComposer
from app.application.utils.date_parser import is_open_at, parse_date, read_clock_time
from app.application.utils.message_rules import (
    NUMBER_WORDS,
    contains_keyword,
    extract_email,
    extract_name,
    extract_phone,
)
from app.domain.entities.booking_state import BookingFields, BookingStep, DialogueState

GENERIC_ERROR_RESULT = "I'm sorry, there was an error processing your request. Please try again."
UNKNOWN_FUNCTION_RESULT = (
    "I'm sorry, I don't understand that request. Please try asking about our menu or making a reservation."
)
DATE_TIME_FORMAT_RESULT = (
    "I'm sorry, there was an issue with the date and time format. Please try again with a clear date and time."
)
ACKNOWLEDGED = {"status": "ok"}

_STATED_PARTY_SIZE = re.compile(
    r"\b(?:party of|table for)\s+(\d{1,2}|" + "|".join(NUMBER_WORDS) + r")\b"
    r"|\b(\d{1,2}|" + "|".join(NUMBER_WORDS) + r")\s+(?:people|guests|persons)\b",
    re.IGNORECASE,
)


class HandleVoiceEventUseCase:
    """
    Server events from the voice assistant.

    Function and tool calls reuse the chat dialogue: getRestaurantInfo goes
    through the information flow, makeReservation builds a fully collected
    state and confirms it with a "yes" turn.
    """

    def __init__(
        self,
        handle_turn: HandleTurnUseCase,
        answer_question: AnswerQuestionUseCase,
        composer: ReplyComposer,
        timezone: ZoneInfo,
        max_party_size: int = 8,
    ) -> None:
        self._handle_turn = handle_turn
        self._answer_question = answer_question
        self._composer = composer
        self._timezone = timezone
        self._max_party_size = max_party_size
        self._logger = logging.getLogger(__name__)

    def execute(self, message: VapiMessageDTO, now: datetime | None = None) -> dict[str, Any]:
        now = now or datetime.now(self._timezone)
        self._logger.info("Voice event received", extra={"action": message.type or "unknown"})

        if message.type == "function-call":
            invocation = message.extract_function_call()
            if invocation is None:
                return {"result": GENERIC_ERROR_RESULT}
            return {"result": self._dispatch(invocation, now)}

        if message.type == "tool-calls":
            return self._tool_results(message.extract_tool_calls(), now)

        if message.type in ("conversation-update", "transcript"):
            return self._handle_conversation(message, now)

        # status-update, end-of-call-report, hang and anything newer
        self._logger.info("Voice event acknowledged", extra={"action": message.type or "unknown", "reason": message.status})
        return ACKNOWLEDGED

    def _handle_conversation(self, message: VapiMessageDTO, now: datetime) -> dict[str, Any]:
        invocation = message.extract_function_call()
        if invocation is not None:
            return {"result": self._dispatch(invocation, now)}

        tool_calls = message.extract_tool_calls()
        if tool_calls:
            return self._tool_results(tool_calls, now)

        transcript = message.final_user_transcript()
        if transcript is None or not self._looks_like_reservation(transcript):
            return ACKNOWLEDGED

        params = self._mine_transcript(transcript, now)
        if not (params.get("name") and params.get("email")):
            self._logger.info("Transcript lacks booking details", extra={"reason": "missing_name_or_email"})
            return ACKNOWLEDGED

        self._logger.info("Reservation mined from transcript", extra={"action": "makeReservation"})
        return {"result": self._make_reservation(params, now)}

    def _tool_results(self, invocations: list[FunctionInvocation], now: datetime) -> dict[str, Any]:
        return {
            "results": [
                {"toolCallId": invocation.call_id, "result": self._dispatch(invocation, now)}
                for invocation in invocations
            ]
        }

    def _dispatch(self, invocation: FunctionInvocation, now: datetime) -> str:
        try:
            params = _parse_arguments(invocation.arguments)
        except ValueError as e:
            self._logger.warning("Bad function arguments", extra={"action": invocation.name, "error": str(e)})
            return GENERIC_ERROR_RESULT

        try:
            if invocation.name == "getRestaurantInfo":
                return self._restaurant_info(params)
            if invocation.name == "makeReservation":
                return self._make_reservation(params, now)
        except Exception as e:
            self._logger.exception("Function call failed", extra={"action": invocation.name, "error": str(e)})
            return GENERIC_ERROR_RESULT

        self._logger.info("Unknown function", extra={"action": invocation.name})
        return UNKNOWN_FUNCTION_RESULT

    def _restaurant_info(self, params: dict[str, Any]) -> str:
        query = params.get("query")
        if not isinstance(query, str) or not query.strip():
            return "What would you like to know about our restaurant or menu?"
        return self._answer_question.execute(query.strip()).text

    def _make_reservation(self, params: dict[str, Any], now: datetime) -> str:
        today = now.astimezone(self._timezone).date()

        name = params.get("name")
        name = name.strip() if isinstance(name, str) and name.strip() else None
        email = extract_email(params["email"]) if isinstance(params.get("email"), str) else None
        raw_date = params.get("date")
        raw_time = params.get("time")
        party_size = _as_int(params.get("partySize"))

        if not (name and email and isinstance(raw_date, str) and isinstance(raw_time, str) and party_size is not None):
            self._logger.info(
                "Reservation call missing details",
                extra={"reason": ",".join(k for k in ("name", "email", "date", "time", "partySize") if not params.get(k))},
            )
            return self._composer.missing_details()

        if not 1 <= party_size <= self._max_party_size:
            self._logger.info("Reservation call party size out of range", extra={"reason": "party_size_limit"})
            return self._composer.retry(BookingStep.PARTY_SIZE, BookingFields(), reason="party_size_limit")

        day = parse_date(raw_date, today)
        at = read_clock_time(raw_time)
        if day is None or at is None:
            return DATE_TIME_FORMAT_RESULT
        if day < today:
            return self._composer.retry(BookingStep.DATE, BookingFields(), reason="past_date")
        if not is_open_at(day, at):
            return self._composer.retry(BookingStep.TIME, BookingFields(date=day), reason="closed")

        requests = params.get("specialRequests")
        phone = extract_phone(params["phone"]) if isinstance(params.get("phone"), str) else None
        fields = BookingFields(
            name=name,
            email=email,
            phone=phone,
            date=day,
            time=at,
            party_size=party_size,
            special_requests=requests.strip() if isinstance(requests, str) and requests.strip().lower() != "none" else "",
        )
        state = DialogueState(step=BookingStep.CONFIRMATION, fields=fields, updated_at=now.timestamp())
        return self._handle_turn.execute("yes", state, now=now).reply

    def _looks_like_reservation(self, transcript: str) -> bool:
        return contains_keyword(transcript, ("reservation",)) and contains_keyword(
            transcript, ("confirm", "book", "complete")
        )

    def _mine_transcript(self, transcript: str, now: datetime) -> dict[str, Any]:
        today = now.astimezone(self._timezone).date()
        params: dict[str, Any] = {}

        name = extract_name(transcript)
        if name:
            params["name"] = name
        email = extract_email(transcript)
        if email:
            params["email"] = email

        day = parse_date(transcript, today)
        if day is not None:
            params["date"] = day.isoformat()
            at = read_clock_time(transcript, allow_bare_hour=False)
            if at is not None:
                params["time"] = at.strftime("%H:%M")

        match = _STATED_PARTY_SIZE.search(transcript)
        if match:
            params["partySize"] = match.group(1) or match.group(2)
        return params


def _parse_arguments(arguments: Any) -> dict[str, Any]:
    if arguments is None:
        return {}
    if isinstance(arguments, dict):
        return arguments
    if isinstance(arguments, str):
        try:
            parsed = json.loads(arguments) if arguments.strip() else {}
        except json.JSONDecodeError as e:
            raise ValueError(f"Arguments are not valid JSON: {e}") from e
        if isinstance(parsed, dict):
            return parsed
    raise ValueError("Arguments must be a JSON object")


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        stripped = value.strip().lower()
        if stripped.lstrip("-").isdigit():
            return int(stripped)
        return NUMBER_WORDS.get(stripped)
    return None
