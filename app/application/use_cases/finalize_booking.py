from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, tzinfo

from app.application.exceptions import CalendarError
from app.application.ports.calendar import CalendarPort
from app.application.ports.spreadsheet import SpreadsheetPort
from app.application.utils.date_parser import format_date, format_time
from app.domain.entities.booking_state import BookingFields
from app.domain.entities.calendar_event import CalendarEvent
from app.domain.entities.reservation import ReservationRecord

BOOKING_KEY_PREFIX = "booking-key:"


@dataclass(frozen=True)
class FinalizeResult:
    status: str  # "booked", "unavailable", "error"
    reservation_id: str | None = None
    record: ReservationRecord | None = None
    persisted: bool = False

    @property
    def short_id(self) -> str:
        return (self.reservation_id or "")[:8].upper()


def booking_key(fields: BookingFields) -> str:
    """Stable key for one set of confirmed details; a repeated "yes" maps to the same key."""
    parts = [
        (fields.name or "").strip().lower(),
        (fields.email or "").strip().lower(),
        (fields.phone or "").strip(),
        fields.date.isoformat() if fields.date else "",
        fields.time.strftime("%H:%M") if fields.time else "",
        str(fields.party_size or ""),
        (fields.special_requests or "").strip().lower(),
    ]
    return hashlib.sha256("|".join(parts).encode("utf-8")).hexdigest()[:16]


class FinalizeBookingUseCase:
    def __init__(
        self,
        calendar: CalendarPort,
        spreadsheet: SpreadsheetPort,
        timezone: tzinfo,
        duration_minutes: int = 120,
    ) -> None:
        self._calendar = calendar
        self._spreadsheet = spreadsheet
        self._timezone = timezone
        self._duration_minutes = duration_minutes
        self._logger = logging.getLogger(__name__)

    def execute(self, fields: BookingFields, now: datetime | None = None) -> FinalizeResult:
        start = fields.instant(self._timezone)
        if start is None or not fields.name or not fields.email or not fields.party_size:
            self._logger.error("Finalize called with incomplete fields")
            return FinalizeResult(status="error")

        record = ReservationRecord(
            name=fields.name,
            email=fields.email,
            phone=fields.phone,
            start=start,
            party_size=fields.party_size,
            special_requests=fields.special_requests or "",
            duration_minutes=self._duration_minutes,
            booking_key=booking_key(fields),
        )

        try:
            events = self._calendar.list_events(record.start, record.end)
        except CalendarError as e:
            self._logger.error("Availability check failed", extra={"error": str(e)})
            return FinalizeResult(status="error", record=record)

        overlapping = [event for event in events if _overlaps(event, record.start, record.end)]
        for event in overlapping:
            if f"{BOOKING_KEY_PREFIX}{record.booking_key}" in (event.description or ""):
                self._logger.info(
                    "Reservation already exists for these details",
                    extra={"reservation_id": event.id},
                )
                return FinalizeResult(status="booked", reservation_id=event.id, record=record, persisted=True)

        if overlapping:
            self._logger.info(
                "Requested slot unavailable",
                extra={"reason": "calendar_conflict", "start": record.start.isoformat()},
            )
            return FinalizeResult(status="unavailable", record=record)

        try:
            event_id = self._calendar.create_event(
                summary=f"Reservation: {record.name} (party of {record.party_size})",
                description=_describe(record),
                start=record.start,
                end=record.end,
            )
        except CalendarError as e:
            self._logger.error("Error creating reservation event", extra={"error": str(e)})
            return FinalizeResult(status="error", record=record)

        persisted = self._persist(record, event_id, now or datetime.now(self._timezone))
        self._logger.info(
            "Reservation created",
            extra={"reservation_id": event_id, "persisted": persisted},
        )
        return FinalizeResult(status="booked", reservation_id=event_id, record=record, persisted=persisted)

    def _persist(self, record: ReservationRecord, event_id: str, created_at: datetime) -> bool:
        row = [
            created_at.isoformat(),
            record.name,
            record.email,
            record.phone or "",
            record.start.date().isoformat(),
            record.start.strftime("%H:%M"),
            record.party_size,
            record.special_requests,
            event_id,
            record.booking_key,
        ]
        try:
            written = self._spreadsheet.append_row(row)
        except Exception as e:
            self._logger.warning(
                "Reservation row not persisted",
                extra={"reservation_id": event_id, "reason": "spreadsheet_error", "error": str(e)},
            )
            return False
        if not written:
            self._logger.warning(
                "Reservation row not persisted",
                extra={"reservation_id": event_id, "reason": "spreadsheet_rejected"},
            )
        return bool(written)


def _overlaps(event: CalendarEvent, start: datetime, end: datetime) -> bool:
    return event.start < end and event.end > start


def _describe(record: ReservationRecord) -> str:
    lines = [
        f"Name: {record.name}",
        f"Email: {record.email}",
    ]
    if record.phone:
        lines.append(f"Phone: {record.phone}")
    lines.extend(
        [
            f"Date: {format_date(record.start.date())}",
            f"Time: {format_time(record.start.time())}",
            f"Party size: {record.party_size}",
            f"Special requests: {record.special_requests or 'None'}",
            f"{BOOKING_KEY_PREFIX}{record.booking_key}",
        ]
    )
    return "\n".join(lines)
