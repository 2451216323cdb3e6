from __future__ import annotations

from dataclasses import replace

from app.domain.entities.booking_state import BookingFields, BookingStep, DialogueState

STEP_FIELDS: dict[BookingStep, tuple[str, ...]] = {
    BookingStep.NAME: ("name",),
    BookingStep.EMAIL: ("email",),
    BookingStep.PHONE: ("phone",),
    BookingStep.DATE: ("date",),
    BookingStep.TIME: ("time",),
    BookingStep.DATETIME: ("date", "time"),
    BookingStep.PARTY_SIZE: ("party_size",),
    BookingStep.SPECIAL_REQUESTS: ("special_requests",),
}


def build_step_sequence(combine_date_time: bool = False, collect_phone: bool = False) -> tuple[BookingStep, ...]:
    """Ordered collection steps; confirmation always follows the last one."""
    steps = [BookingStep.NAME, BookingStep.EMAIL]
    if collect_phone:
        steps.append(BookingStep.PHONE)
    if combine_date_time:
        steps.append(BookingStep.DATETIME)
    else:
        steps.extend((BookingStep.DATE, BookingStep.TIME))
    steps.extend((BookingStep.PARTY_SIZE, BookingStep.SPECIAL_REQUESTS))
    return tuple(steps)


def is_filled(fields: BookingFields, step: BookingStep) -> bool:
    return all(getattr(fields, name) is not None for name in STEP_FIELDS.get(step, ()))


def next_step(fields: BookingFields, sequence: tuple[BookingStep, ...]) -> BookingStep:
    for step in sequence:
        if not is_filled(fields, step):
            return step
    return BookingStep.CONFIRMATION


def step_for_field(field_name: str, sequence: tuple[BookingStep, ...]) -> BookingStep | None:
    for step in sequence:
        if field_name in STEP_FIELDS[step]:
            return step
    return None


def fields_for_step(step: BookingStep) -> tuple[str, ...]:
    return STEP_FIELDS.get(step, ())


def clear_fields(fields: BookingFields, *names: str) -> BookingFields:
    return replace(fields, **{name: None for name in names})


def advance(fields: BookingFields, sequence: tuple[BookingStep, ...], now_ts: float) -> DialogueState:
    """New state with the given fields and the step recomputed from them."""
    return DialogueState(step=next_step(fields, sequence), fields=fields, updated_at=now_ts)


def is_expired(state: DialogueState, ttl_seconds: float, now_ts: float) -> bool:
    if ttl_seconds <= 0 or state.updated_at is None:
        return False
    return now_ts - state.updated_at > ttl_seconds
