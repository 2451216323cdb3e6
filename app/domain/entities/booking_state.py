from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, tzinfo
from enum import Enum


class BookingStep(str, Enum):
    NAME = "name"
    EMAIL = "email"
    PHONE = "phone"
    DATE = "date"
    TIME = "time"
    DATETIME = "datetime"
    PARTY_SIZE = "party_size"
    SPECIAL_REQUESTS = "special_requests"
    CONFIRMATION = "confirmation"


@dataclass(frozen=True)
class BookingFields:
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    date: date | None = None
    time: time | None = None
    party_size: int | None = None
    special_requests: str | None = None  # "" means the guest has none

    def instant(self, tz: tzinfo) -> datetime | None:
        if self.date is None or self.time is None:
            return None
        return datetime.combine(self.date, self.time, tzinfo=tz)


@dataclass(frozen=True)
class DialogueState:
    step: BookingStep = BookingStep.NAME
    fields: BookingFields = BookingFields()
    updated_at: float | None = None  # epoch seconds of the last change
