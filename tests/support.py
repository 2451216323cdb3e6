from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo

from app.application.use_cases.booking import BookingUseCase
from app.application.use_cases.finalize_booking import FinalizeBookingUseCase
from app.application.use_cases.reply_composer import ReplyComposer
from app.infrastructure.calendar.mock_calendar import MockCalendar
from app.infrastructure.sheets.mock_sheets import MockSheets

TZ = ZoneInfo("America/New_York")
# Tuesday morning, before opening
NOW = datetime(2026, 3, 10, 10, 0, tzinfo=TZ)


def build_booking(
    calendar: MockCalendar,
    sheets: MockSheets,
    combine_date_time: bool = False,
    collect_phone: bool = False,
) -> BookingUseCase:
    finalizer = FinalizeBookingUseCase(calendar=calendar, spreadsheet=sheets, timezone=TZ)
    return BookingUseCase(
        finalizer=finalizer,
        composer=ReplyComposer(restaurant_name="Ristorante Bella Vista", max_party_size=8),
        timezone=TZ,
        combine_date_time=combine_date_time,
        collect_phone=collect_phone,
    )
