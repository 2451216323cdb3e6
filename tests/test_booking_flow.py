"""
Tests for the reservation dialogue: slot filling, confirmation edits and finalization outcomes.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta

from app.application.dto.dialogue_state import serialize_dialogue_state
from app.domain.entities.booking_state import BookingFields, BookingStep, DialogueState
from app.infrastructure.calendar.mock_calendar import MockCalendar
from app.infrastructure.sheets.mock_sheets import MockSheets
from tests.support import NOW, TZ, build_booking

FULL_FIELDS = BookingFields(
    name="Ana Lopez",
    email="ana@example.com",
    date=date(2026, 3, 15),  # Sunday
    time=time(19, 0),
    party_size=4,
    special_requests="",
)


def _confirmation_state(fields: BookingFields = FULL_FIELDS) -> DialogueState:
    return DialogueState(step=BookingStep.CONFIRMATION, fields=fields, updated_at=NOW.timestamp())


def _run(booking, state, *utterances, now=NOW):
    result = None
    for utterance in utterances:
        result = booking.process_booking_intent(utterance, state, now)
        state = result.updated_state
    return result


def test_start_asks_for_name(booking):
    result = booking.start(NOW)
    assert result.action == "start"
    assert result.updated_state.step == BookingStep.NAME
    assert "name" in result.message.lower()


def test_full_dialogue_books_and_clears_state(booking, calendar, sheets):
    """Collect every field, confirm, and end with no state and a reservation id."""
    state = booking.start(NOW).updated_state
    expected_steps = [
        ("Ana Lopez", BookingStep.EMAIL),
        ("ana@example.com", BookingStep.DATE),
        ("March 15", BookingStep.TIME),
        ("7pm", BookingStep.PARTY_SIZE),
        ("4", BookingStep.SPECIAL_REQUESTS),
        ("none", BookingStep.CONFIRMATION),
    ]
    for utterance, expected in expected_steps:
        result = booking.process_booking_intent(utterance, state, NOW)
        state = result.updated_state
        assert state.step == expected, utterance

    assert result.action == "confirm"
    assert "Please review your reservation" in result.message
    assert state.fields == FULL_FIELDS

    result = booking.process_booking_intent("yes", state, NOW)

    assert result.action == "booked"
    assert result.updated_state is None
    assert "MOCKEVEN" in result.message
    assert len(calendar.events) == 1
    event = calendar.events[0]
    assert event.start == datetime(2026, 3, 15, 19, 0, tzinfo=TZ)
    assert event.end - event.start == timedelta(minutes=120)
    assert len(sheets.rows) == 1


def test_date_step_also_takes_explicit_time(booking):
    state = DialogueState(
        step=BookingStep.DATE,
        fields=BookingFields(name="Ana", email="ana@example.com"),
    )
    result = booking.process_booking_intent("March 15 at 7:30pm", state, NOW)
    assert result.updated_state.step == BookingStep.PARTY_SIZE
    assert result.updated_state.fields.time == time(19, 30)
    assert "7:30 PM" in result.message


def test_date_step_ignores_bare_numbers_as_time(booking):
    state = DialogueState(step=BookingStep.DATE, fields=BookingFields(name="Ana", email="ana@example.com"))
    result = booking.process_booking_intent("3/15", state, NOW)
    assert result.updated_state.fields.date == date(2026, 3, 15)
    assert result.updated_state.fields.time is None
    assert result.updated_state.step == BookingStep.TIME


def test_past_date_is_rejected(booking):
    state = DialogueState(step=BookingStep.DATE, fields=BookingFields(name="Ana", email="ana@example.com"))
    result = booking.process_booking_intent("March 1, 2025", state, NOW)
    assert result.action == "retry"
    assert result.updated_state.step == BookingStep.DATE
    assert result.updated_state.fields.date is None
    assert "already passed" in result.message


def test_year_less_past_date_rolls_forward(booking):
    state = DialogueState(step=BookingStep.DATE, fields=BookingFields(name="Ana", email="ana@example.com"))
    result = booking.process_booking_intent("January 5", state, NOW)
    assert result.updated_state.fields.date == date(2027, 1, 5)


def test_unreadable_date_reprompts(booking):
    state = DialogueState(step=BookingStep.DATE, fields=BookingFields(name="Ana", email="ana@example.com"))
    result = booking.process_booking_intent("whenever", state, NOW)
    assert result.action == "retry"
    assert result.updated_state.step == BookingStep.DATE
    assert "couldn't understand that date" in result.message


def test_time_outside_opening_hours_is_rejected(booking):
    fields = BookingFields(name="Ana", email="ana@example.com", date=date(2026, 3, 13))  # Friday
    result = booking.process_booking_intent("11pm", DialogueState(step=BookingStep.TIME, fields=fields), NOW)
    assert result.action == "retry"
    assert result.updated_state.step == BookingStep.TIME
    assert result.updated_state.fields.time is None
    assert "11:30 AM to 10:00 PM" in result.message


def test_meridiem_less_morning_time_is_reprompted_not_shifted(booking):
    fields = BookingFields(name="Ana", email="ana@example.com", date=date(2026, 3, 14))  # Saturday
    result = booking.process_booking_intent("10:30", DialogueState(step=BookingStep.TIME, fields=fields), NOW)
    assert result.action == "retry"
    assert result.updated_state.fields.time is None


def test_time_earlier_today_rolls_to_tomorrow(booking):
    evening = datetime(2026, 3, 10, 20, 0, tzinfo=TZ)
    fields = BookingFields(name="Ana", email="ana@example.com", date=date(2026, 3, 10))
    result = booking.process_booking_intent("7pm", DialogueState(step=BookingStep.TIME, fields=fields), evening)
    assert result.updated_state.fields.date == date(2026, 3, 11)
    assert result.updated_state.fields.time == time(19, 0)
    assert result.updated_state.step == BookingStep.PARTY_SIZE


def test_new_date_clears_time_outside_its_hours(booking):
    """22:30 is fine on a weekend but not on a Friday."""
    fields = BookingFields(name="Ana", email="ana@example.com", time=time(22, 30))
    result = booking.process_booking_intent("March 13", DialogueState(step=BookingStep.DATE, fields=fields), NOW)
    assert result.updated_state.fields.date == date(2026, 3, 13)
    assert result.updated_state.fields.time is None
    assert result.updated_state.step == BookingStep.TIME
    assert "Heads up" in result.message


def test_party_size_boundary(booking):
    fields = BookingFields(name="Ana", email="ana@example.com", date=date(2026, 3, 15), time=time(19, 0))
    state = DialogueState(step=BookingStep.PARTY_SIZE, fields=fields)

    result = booking.process_booking_intent("9 people", state, NOW)
    assert result.action == "retry"
    assert result.updated_state.fields.party_size is None
    assert result.updated_state.step == BookingStep.PARTY_SIZE
    assert "1 to 8" in result.message

    result = booking.process_booking_intent("8 people", result.updated_state, NOW)
    assert result.updated_state.fields.party_size == 8
    assert result.updated_state.step == BookingStep.SPECIAL_REQUESTS


def test_filled_fields_are_never_overwritten(booking):
    """A stale declared step is ignored; the next unset field is the one collected."""
    state = DialogueState(step=BookingStep.NAME, fields=BookingFields(name="Ana"))
    result = booking.process_booking_intent("Bob", state, NOW)
    assert result.action == "retry"
    assert result.updated_state.fields.name == "Ana"
    assert result.updated_state.step == BookingStep.EMAIL


def test_confirmation_edit_clears_one_field(booking):
    result = booking.process_booking_intent("change the email", _confirmation_state(), NOW)
    assert result.action == "change"
    assert result.updated_state.step == BookingStep.EMAIL
    assert result.updated_state.fields.email is None
    assert result.updated_state.fields.name == "Ana Lopez"

    result = booking.process_booking_intent("ana.lopez@example.com", result.updated_state, NOW)
    assert result.updated_state.step == BookingStep.CONFIRMATION
    assert result.updated_state.fields.email == "ana.lopez@example.com"


def test_confirmation_without_a_field_asks_what_to_change(booking):
    result = booking.process_booking_intent("hmm", _confirmation_state(), NOW)
    assert result.action == "confirm"
    assert result.updated_state.step == BookingStep.CONFIRMATION
    assert "Which detail" in result.message


def test_correction_starting_with_yes_letters_edits_instead_of_booking(booking, calendar):
    """A name that starts with yes is a correction, not a confirmation."""
    fields = BookingFields(
        name="Jessica",
        email="ana@example.com",
        date=date(2026, 3, 15),
        time=time(19, 0),
        party_size=4,
        special_requests="",
    )
    result = booking.process_booking_intent("the name should be Yesenia", _confirmation_state(fields), NOW)
    assert result.action == "change"
    assert result.updated_state.step == BookingStep.NAME
    assert result.updated_state.fields.name is None
    assert calendar.events == []


def test_mistake_abandons_reservation(booking, calendar):
    result = booking.process_booking_intent("that was a mistake", _confirmation_state(), NOW)
    assert result.action == "abandoned"
    assert result.updated_state is None
    assert calendar.events == []


def test_unavailable_slot_clears_date_and_time(booking, calendar):
    calendar.create_event(
        summary="Private event",
        description="",
        start=datetime(2026, 3, 15, 18, 30, tzinfo=TZ),
        end=datetime(2026, 3, 15, 20, 30, tzinfo=TZ),
    )
    result = booking.process_booking_intent("yes", _confirmation_state(), NOW)

    assert result.action == "unavailable"
    assert result.updated_state.step == BookingStep.DATE
    assert result.updated_state.fields.date is None
    assert result.updated_state.fields.time is None
    assert "already booked" in result.message

    payload = serialize_dialogue_state(result.updated_state, TZ)
    assert payload["step"] == "date"
    assert payload["fields"]["date"] is None
    assert payload["fields"]["time"] is None
    assert payload["fields"]["dateTime"] is None
    assert len(calendar.events) == 1


def test_repeated_confirmation_does_not_double_book(booking, calendar):
    first = booking.process_booking_intent("yes", _confirmation_state(), NOW)
    second = booking.process_booking_intent("yes", _confirmation_state(), NOW)
    assert first.action == second.action == "booked"
    assert first.message == second.message
    assert len(calendar.events) == 1


def test_calendar_failure_keeps_confirmation_state():
    booking = build_booking(MockCalendar(fail_on_create=True), MockSheets())
    result = booking.process_booking_intent("yes", _confirmation_state(), NOW)
    assert result.action == "error"
    assert result.updated_state.step == BookingStep.CONFIRMATION
    assert result.updated_state.fields == FULL_FIELDS
    assert "try again" in result.message


def test_spreadsheet_failure_still_books():
    calendar = MockCalendar()
    booking = build_booking(calendar, MockSheets(fail=True))
    result = booking.process_booking_intent("yes", _confirmation_state(), NOW)
    assert result.action == "booked"
    assert result.updated_state is None
    assert len(calendar.events) == 1


def test_confirming_a_time_that_has_passed_asks_for_new_time(booking, calendar):
    fields = BookingFields(
        name="Ana",
        email="ana@example.com",
        date=date(2026, 3, 10),
        time=time(12, 0),
        party_size=2,
        special_requests="",
    )
    afternoon = datetime(2026, 3, 10, 13, 0, tzinfo=TZ)
    result = booking.process_booking_intent("yes", _confirmation_state(fields), afternoon)
    assert result.action == "retry"
    assert result.updated_state.step == BookingStep.TIME
    assert result.updated_state.fields.time is None
    assert calendar.events == []


def test_phone_step_when_enabled(booking_factory):
    booking = booking_factory(collect_phone=True)
    assert BookingStep.PHONE in booking.steps
    state = DialogueState(step=BookingStep.EMAIL, fields=BookingFields(name="Ana"))
    result = _run(booking, state, "ana@example.com")
    assert result.updated_state.step == BookingStep.PHONE
    result = _run(booking, result.updated_state, "555-123-4567")
    assert result.updated_state.fields.phone == "5551234567"
    assert result.updated_state.step == BookingStep.DATE


def test_combined_date_time_in_one_utterance(booking_factory):
    booking = booking_factory(combine_date_time=True)
    assert BookingStep.DATETIME in booking.steps
    state = DialogueState(step=BookingStep.DATETIME, fields=BookingFields(name="Ana", email="ana@example.com"))
    result = _run(booking, state, "March 15 at 7pm")
    assert result.updated_state.step == BookingStep.PARTY_SIZE
    assert result.updated_state.fields.date == date(2026, 3, 15)
    assert result.updated_state.fields.time == time(19, 0)


def test_combined_date_time_one_half_at_a_time(booking_factory):
    booking = booking_factory(combine_date_time=True)
    state = DialogueState(step=BookingStep.DATETIME, fields=BookingFields(name="Ana", email="ana@example.com"))

    result = _run(booking, state, "March 15")
    assert result.updated_state.step == BookingStep.DATETIME
    assert result.updated_state.fields.date == date(2026, 3, 15)
    assert "What time" in result.message

    result = _run(booking, result.updated_state, "8pm")
    assert result.updated_state.step == BookingStep.PARTY_SIZE
    assert result.updated_state.fields.time == time(20, 0)


def test_combined_mode_unavailable_returns_to_datetime(booking_factory, calendar):
    booking = booking_factory(combine_date_time=True)
    calendar.create_event(
        summary="Private event",
        description="",
        start=datetime(2026, 3, 15, 19, 0, tzinfo=TZ),
        end=datetime(2026, 3, 15, 21, 0, tzinfo=TZ),
    )
    result = booking.process_booking_intent("yes", _confirmation_state(), NOW)
    assert result.action == "unavailable"
    assert result.updated_state.step == BookingStep.DATETIME
    assert "date and time" in result.message


def test_combined_mode_time_edit_clears_both(booking_factory):
    booking = booking_factory(combine_date_time=True)
    result = booking.process_booking_intent("change the time", _confirmation_state(), NOW)
    assert result.updated_state.step == BookingStep.DATETIME
    assert result.updated_state.fields.date is None
    assert result.updated_state.fields.time is None
