from __future__ import annotations

import logging
from datetime import date, time, tzinfo
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from app.application.utils.date_parser import is_open_at
from app.application.utils.message_rules import extract_email, extract_phone
from app.domain.entities.booking_state import BookingFields, BookingStep, DialogueState

logger = logging.getLogger(__name__)

MAX_TEXT_LENGTH = 500


class BookingFieldsDTO(BaseModel):
    """Client-held booking fields. Values are untyped on purpose and re-validated in to_entity()."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: Any = None
    email: Any = None
    phone: Any = None
    date: Any = None
    time: Any = None
    date_time: Any = Field(default=None, alias="dateTime")
    party_size: Any = Field(default=None, alias="partySize")
    special_requests: Any = Field(default=None, alias="specialRequests")

    def to_entity(self, max_party_size: int = 8) -> BookingFields:
        resolved_date = _as_date(self.date)
        resolved_time = _as_time(self.time)
        if resolved_time is not None and (resolved_date is None or not is_open_at(resolved_date, resolved_time)):
            resolved_time = None

        return BookingFields(
            name=_as_text(self.name),
            email=extract_email(self.email) if isinstance(self.email, str) else None,
            phone=extract_phone(self.phone) if isinstance(self.phone, str) else None,
            date=resolved_date,
            time=resolved_time,
            party_size=_as_party_size(self.party_size, max_party_size),
            special_requests=_as_text(self.special_requests, allow_empty=True),
        )

    @classmethod
    def from_entity(cls, fields: BookingFields, timezone: tzinfo) -> "BookingFieldsDTO":
        instant = fields.instant(timezone)
        return cls(
            name=fields.name,
            email=fields.email,
            phone=fields.phone,
            date=fields.date.isoformat() if fields.date else None,
            time=fields.time.strftime("%H:%M") if fields.time else None,
            date_time=instant.isoformat() if instant else None,
            party_size=fields.party_size,
            special_requests=fields.special_requests,
        )


class DialogueStateDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    step: Any = None
    booking_fields: BookingFieldsDTO = Field(
        default_factory=BookingFieldsDTO,
        validation_alias=AliasChoices("fields", "data"),
        serialization_alias="fields",
    )
    updated_at: Any = Field(default=None, alias="updatedAt")

    def to_entity(self, max_party_size: int = 8) -> DialogueState:
        try:
            step = BookingStep(self.step)
        except (ValueError, TypeError):
            step = BookingStep.NAME

        updated_at = self.updated_at if isinstance(self.updated_at, (int, float)) and not isinstance(self.updated_at, bool) else None
        return DialogueState(
            step=step,
            fields=self.booking_fields.to_entity(max_party_size),
            updated_at=float(updated_at) if updated_at is not None else None,
        )

    @classmethod
    def from_entity(cls, state: DialogueState, timezone: tzinfo) -> "DialogueStateDTO":
        return cls(
            step=state.step.value,
            booking_fields=BookingFieldsDTO.from_entity(state.fields, timezone),
            updated_at=state.updated_at,
        )

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


def parse_dialogue_state(payload: Any, max_party_size: int = 8) -> DialogueState | None:
    """
    Turn a client-supplied state into a DialogueState.
    Anything that is not an object is treated as no state; malformed values
    inside are dropped field by field so the dialogue asks for them again.
    """
    if payload is None:
        return None
    if not isinstance(payload, dict):
        logger.warning("Ignoring non-object booking state", extra={"reason": type(payload).__name__})
        return None
    if not isinstance(payload.get("fields", payload.get("data", {})), dict):
        logger.warning("Ignoring booking state with malformed fields", extra={"reason": "fields_not_object"})
        return None
    try:
        dto = DialogueStateDTO.model_validate(payload)
    except ValidationError as e:
        logger.warning("Ignoring invalid booking state", extra={"error": str(e)})
        return None
    return dto.to_entity(max_party_size)


def serialize_dialogue_state(state: DialogueState | None, timezone: tzinfo) -> dict[str, Any] | None:
    if state is None:
        return None
    return DialogueStateDTO.from_entity(state, timezone).to_payload()


def _as_text(value: Any, allow_empty: bool = False) -> str | None:
    if not isinstance(value, str):
        return None
    stripped = value.strip()[:MAX_TEXT_LENGTH]
    if not stripped and not allow_empty:
        return None
    return stripped


def _as_date(value: Any) -> date | None:
    if not isinstance(value, str):
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


def _as_time(value: Any) -> time | None:
    if not isinstance(value, str):
        return None
    try:
        parsed = time.fromisoformat(value.strip())
    except ValueError:
        return None
    return parsed.replace(second=0, microsecond=0, tzinfo=None)


def _as_party_size(value: Any, max_party_size: int) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if isinstance(value, int) and 1 <= value <= max_party_size:
        return value
    return None
