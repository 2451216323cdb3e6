"""
Tests for turning confirmed booking fields into a calendar event and a spreadsheet row.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, time

from app.application.use_cases.finalize_booking import BOOKING_KEY_PREFIX, FinalizeBookingUseCase, booking_key
from app.domain.entities.booking_state import BookingFields
from app.infrastructure.calendar.mock_calendar import MockCalendar
from app.infrastructure.sheets.mock_sheets import MockSheets
from tests.support import NOW, TZ

FIELDS = BookingFields(
    name="Ana Lopez",
    email="ana@example.com",
    date=date(2026, 3, 14),
    time=time(20, 0),
    party_size=2,
    special_requests="Window seat",
)


def _finalizer(calendar: MockCalendar, sheets: MockSheets) -> FinalizeBookingUseCase:
    return FinalizeBookingUseCase(calendar=calendar, spreadsheet=sheets, timezone=TZ, duration_minutes=90)


def test_booking_key_is_stable_and_detail_sensitive():
    assert booking_key(FIELDS) == booking_key(replace(FIELDS, name="  ana lopez "))
    assert booking_key(FIELDS) != booking_key(replace(FIELDS, party_size=3))
    assert len(booking_key(FIELDS)) == 16


def test_books_event_and_appends_row():
    calendar, sheets = MockCalendar(), MockSheets()
    result = _finalizer(calendar, sheets).execute(FIELDS, NOW)

    assert result.status == "booked"
    assert result.persisted is True
    assert result.short_id == result.reservation_id[:8].upper()

    event = calendar.events[0]
    assert event.start == datetime(2026, 3, 14, 20, 0, tzinfo=TZ)
    assert event.end == datetime(2026, 3, 14, 21, 30, tzinfo=TZ)
    assert "Ana Lopez" in event.summary
    assert f"{BOOKING_KEY_PREFIX}{booking_key(FIELDS)}" in event.description

    row = sheets.rows[0]
    assert row[1:8] == ["Ana Lopez", "ana@example.com", "", "2026-03-14", "20:00", 2, "Window seat"]
    assert row[8] == result.reservation_id


def test_conflicting_event_makes_slot_unavailable():
    calendar, sheets = MockCalendar(), MockSheets()
    calendar.create_event("Walk-in party", "", datetime(2026, 3, 14, 21, 0, tzinfo=TZ), datetime(2026, 3, 14, 23, 0, tzinfo=TZ))

    result = _finalizer(calendar, sheets).execute(FIELDS, NOW)

    assert result.status == "unavailable"
    assert len(calendar.events) == 1
    assert sheets.rows == []


def test_adjacent_event_does_not_conflict():
    calendar, sheets = MockCalendar(), MockSheets()
    calendar.create_event("Lunch", "", datetime(2026, 3, 14, 18, 0, tzinfo=TZ), datetime(2026, 3, 14, 20, 0, tzinfo=TZ))

    assert _finalizer(calendar, sheets).execute(FIELDS, NOW).status == "booked"


def test_same_details_return_existing_reservation():
    calendar, sheets = MockCalendar(), MockSheets()
    finalizer = _finalizer(calendar, sheets)

    first = finalizer.execute(FIELDS, NOW)
    second = finalizer.execute(FIELDS, NOW)

    assert second.status == "booked"
    assert second.reservation_id == first.reservation_id
    assert len(calendar.events) == 1
    assert len(sheets.rows) == 1


def test_calendar_lookup_failure_is_an_error():
    result = _finalizer(MockCalendar(fail_on_list=True), MockSheets()).execute(FIELDS, NOW)
    assert result.status == "error"


def test_calendar_create_failure_is_an_error():
    sheets = MockSheets()
    result = _finalizer(MockCalendar(fail_on_create=True), sheets).execute(FIELDS, NOW)
    assert result.status == "error"
    assert sheets.rows == []


def test_spreadsheet_failure_still_books():
    calendar = MockCalendar()
    result = _finalizer(calendar, MockSheets(fail=True)).execute(FIELDS, NOW)
    assert result.status == "booked"
    assert result.persisted is False
    assert len(calendar.events) == 1


def test_incomplete_fields_are_an_error():
    result = _finalizer(MockCalendar(), MockSheets()).execute(replace(FIELDS, time=None), NOW)
    assert result.status == "error"
