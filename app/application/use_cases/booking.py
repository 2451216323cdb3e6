from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime
from zoneinfo import ZoneInfo

from app.application.use_cases.finalize_booking import FinalizeBookingUseCase
from app.application.use_cases.reply_composer import ReplyComposer
from app.application.utils.date_parser import is_open_at, parse_date, read_clock_time, resolve_instant
from app.application.utils.message_rules import (
    extract_email,
    extract_name,
    extract_party_size,
    extract_phone,
    extract_special_requests,
    find_field_keyword,
    is_abandon_request,
    is_confirmation,
    mentions_number,
)
from app.application.utils.state_helpers import (
    advance,
    build_step_sequence,
    clear_fields,
    fields_for_step,
    next_step,
    step_for_field,
)
from app.domain.entities.booking_state import BookingFields, BookingStep, DialogueState


@dataclass(frozen=True)
class BookingResult:
    action: str
    message: str
    updated_state: DialogueState | None


class BookingUseCase:
    """
    Slot-filling dialogue for table reservations.

    Every turn recomputes the active step from the filled fields, so the
    step stored in a client-supplied state is never trusted on its own.
    Values are only written into unset fields; the confirmation step is
    the one place that clears a field so it can be collected again.
    """

    def __init__(
        self,
        finalizer: FinalizeBookingUseCase,
        composer: ReplyComposer,
        timezone: ZoneInfo,
        max_party_size: int = 8,
        combine_date_time: bool = False,
        collect_phone: bool = False,
    ) -> None:
        self._finalizer = finalizer
        self._composer = composer
        self._timezone = timezone
        self._max_party_size = max_party_size
        self._sequence = build_step_sequence(combine_date_time=combine_date_time, collect_phone=collect_phone)
        self._logger = logging.getLogger(__name__)

    @property
    def steps(self) -> tuple[BookingStep, ...]:
        return self._sequence

    def start(self, now: datetime | None = None) -> BookingResult:
        now = self._now(now)
        state = advance(BookingFields(), self._sequence, now.timestamp())
        return BookingResult(action="start", message=self._composer.start(), updated_state=state)

    def process_booking_intent(
        self,
        message_text: str,
        current_state: DialogueState,
        now: datetime | None = None,
    ) -> BookingResult:
        now = self._now(now)
        fields = current_state.fields
        step = next_step(fields, self._sequence)

        if step != current_state.step:
            self._logger.info(
                "Realigned dialogue step",
                extra={"step": step.value, "reason": f"declared_{current_state.step.value}"},
            )

        if step == BookingStep.NAME:
            return self._process_single(step, extract_name(message_text), "name", fields, now)
        if step == BookingStep.EMAIL:
            return self._process_single(step, extract_email(message_text), "email", fields, now)
        if step == BookingStep.PHONE:
            return self._process_single(step, extract_phone(message_text), "phone", fields, now)
        if step == BookingStep.DATE:
            return self._process_date_input(message_text, fields, now)
        if step == BookingStep.TIME:
            return self._process_time_input(message_text, fields, now)
        if step == BookingStep.DATETIME:
            return self._process_datetime_input(message_text, fields, now)
        if step == BookingStep.PARTY_SIZE:
            size = extract_party_size(message_text, self._max_party_size)
            if size is None and mentions_number(message_text):
                return self._retry(step, fields, now, reason="party_size_limit")
            return self._process_single(step, size, "party_size", fields, now)
        if step == BookingStep.SPECIAL_REQUESTS:
            requests = extract_special_requests(message_text)
            return self._process_single(step, requests, "special_requests", fields, now)

        return self._process_confirmation(message_text, fields, now)

    def _process_single(
        self,
        step: BookingStep,
        value: str | int | None,
        field_name: str,
        fields: BookingFields,
        now: datetime,
    ) -> BookingResult:
        if value is None:
            return self._retry(step, fields, now)
        return self._store(step, replace(fields, **{field_name: value}), now)

    def _process_date_input(self, message_text: str, fields: BookingFields, now: datetime) -> BookingResult:
        today = self._today(now)
        parsed_date = parse_date(message_text, today)
        if parsed_date is None:
            return self._retry(BookingStep.DATE, fields, now)
        if parsed_date < today:
            return self._retry(BookingStep.DATE, fields, now, reason="past_date")

        updated = replace(fields, date=parsed_date)
        if updated.time is None:
            # "March 15 at 7pm" fills both; bare numbers here belong to the date
            spoken_time = read_clock_time(message_text, allow_bare_hour=False)
            if spoken_time is not None and is_open_at(parsed_date, spoken_time):
                updated = replace(updated, time=spoken_time)

        updated, reason = self._revalidate_time(updated, now)
        return self._store(BookingStep.DATE, updated, now, reason=reason)

    def _process_time_input(self, message_text: str, fields: BookingFields, now: datetime) -> BookingResult:
        day = fields.date or self._today(now)
        spoken_time = read_clock_time(message_text)
        if spoken_time is None:
            return self._retry(BookingStep.TIME, fields, now)
        if not is_open_at(day, spoken_time):
            return self._retry(BookingStep.TIME, fields, now, reason="closed")

        updated, reason = self._revalidate_time(replace(fields, date=day, time=spoken_time), now)
        if reason:
            return self._retry(BookingStep.TIME, updated, now, reason=reason)
        return self._store(BookingStep.TIME, updated, now)

    def _process_datetime_input(self, message_text: str, fields: BookingFields, now: datetime) -> BookingResult:
        today = self._today(now)
        parsed_date = parse_date(message_text, today) if fields.date is None else None
        if parsed_date is not None and parsed_date < today:
            return self._retry(BookingStep.DATETIME, fields, now, reason="past_date")

        day = parsed_date or fields.date
        spoken_time = None
        if fields.time is None:
            spoken_time = read_clock_time(message_text, allow_bare_hour=parsed_date is None)

        if parsed_date is None and spoken_time is None:
            return self._retry(BookingStep.DATETIME, fields, now)

        updated = fields
        reason = None
        if parsed_date is not None:
            updated = replace(updated, date=parsed_date)
        if spoken_time is not None:
            if is_open_at(day or today, spoken_time):
                updated = replace(updated, time=spoken_time)
            else:
                reason = "closed"

        updated, revalidated = self._revalidate_time(updated, now)
        reason = reason or revalidated
        if reason and updated.time is None and updated.date is None:
            return self._retry(BookingStep.DATETIME, updated, now, reason=reason)
        return self._store(BookingStep.DATETIME, updated, now, reason=reason)

    def _revalidate_time(self, fields: BookingFields, now: datetime) -> tuple[BookingFields, str | None]:
        """
        Keep date and time consistent: a stored time must be open on the stored
        date, and the combined instant must lie in the future (rolling forward
        like the guest most likely meant).
        """
        if fields.date is None or fields.time is None:
            return fields, None
        if not is_open_at(fields.date, fields.time):
            return replace(fields, time=None), "time_cleared"

        instant = resolve_instant(fields.date, fields.time, now, self._timezone)
        rolled_date = instant.date()
        if rolled_date != fields.date:
            self._logger.info(
                "Rolled reservation date forward",
                extra={"reason": "past_instant", "date": rolled_date.isoformat()},
            )
            if not is_open_at(rolled_date, fields.time):
                return replace(fields, date=rolled_date, time=None), "time_cleared"
        return replace(fields, date=rolled_date), None

    def _process_confirmation(self, message_text: str, fields: BookingFields, now: datetime) -> BookingResult:
        if is_confirmation(message_text):
            return self._confirm_booking(fields, now)

        if is_abandon_request(message_text):
            self._logger.info("Reservation abandoned at confirmation", extra={"action": "abandoned"})
            return BookingResult(action="abandoned", message=self._composer.abandoned(), updated_state=None)

        field_name = find_field_keyword(message_text)
        step = step_for_field(field_name, self._sequence) if field_name else None
        if step is not None:
            cleared = clear_fields(fields, *fields_for_step(step))
            state = advance(cleared, self._sequence, now.timestamp())
            return BookingResult(
                action="change",
                message=self._composer.change(state.step, cleared),
                updated_state=state,
            )

        return BookingResult(
            action="confirm",
            message=self._composer.ask_what_to_change(),
            updated_state=advance(fields, self._sequence, now.timestamp()),
        )

    def _confirm_booking(self, fields: BookingFields, now: datetime) -> BookingResult:
        start = fields.instant(self._timezone)
        if start is not None and start <= now:
            cleared = clear_fields(fields, "time")
            return self._retry(next_step(cleared, self._sequence), cleared, now, reason="past_time")

        result = self._finalizer.execute(fields, now)

        if result.status == "booked" and result.record is not None:
            return BookingResult(
                action="booked",
                message=self._composer.booked(result.record, result.short_id),
                updated_state=None,
            )

        if result.status == "unavailable":
            cleared = clear_fields(fields, "date", "time")
            state = advance(cleared, self._sequence, now.timestamp())
            return BookingResult(
                action="unavailable",
                message=self._composer.unavailable(state.step),
                updated_state=state,
            )

        return BookingResult(
            action="error",
            message=self._composer.finalize_error(),
            updated_state=advance(fields, self._sequence, now.timestamp()),
        )

    def _store(
        self,
        step: BookingStep,
        fields: BookingFields,
        now: datetime,
        reason: str | None = None,
    ) -> BookingResult:
        state = advance(fields, self._sequence, now.timestamp())
        action = "confirm" if state.step == BookingStep.CONFIRMATION else "captured"
        return BookingResult(
            action=action,
            message=self._composer.captured(step, fields, state.step, reason=reason),
            updated_state=state,
        )

    def _retry(
        self,
        step: BookingStep,
        fields: BookingFields,
        now: datetime,
        reason: str | None = None,
    ) -> BookingResult:
        state = advance(fields, self._sequence, now.timestamp())
        return BookingResult(
            action="retry",
            message=self._composer.retry(step, fields, reason),
            updated_state=state,
        )

    def _now(self, now: datetime | None) -> datetime:
        if now is None:
            return datetime.now(self._timezone)
        if now.tzinfo is None:
            return now.replace(tzinfo=self._timezone)
        return now

    def _today(self, now: datetime) -> date:
        return now.astimezone(self._timezone).date()
