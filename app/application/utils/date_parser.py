from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta, tzinfo

# weekday() -> (opening, last seating); both ends are bookable
WEEKDAY_HOURS = (time(11, 30), time(22, 0))
WEEKEND_HOURS = (time(11, 0), time(23, 0))
OPENING_HOURS: dict[int, tuple[time, time]] = {
    0: WEEKDAY_HOURS,
    1: WEEKDAY_HOURS,
    2: WEEKDAY_HOURS,
    3: WEEKDAY_HOURS,
    4: WEEKDAY_HOURS,
    5: WEEKEND_HOURS,
    6: WEEKEND_HOURS,
}

MONTH_NAMES = {
    "january": 1,
    "jan": 1,
    "february": 2,
    "feb": 2,
    "march": 3,
    "mar": 3,
    "april": 4,
    "apr": 4,
    "may": 5,
    "june": 6,
    "jun": 6,
    "july": 7,
    "jul": 7,
    "august": 8,
    "aug": 8,
    "september": 9,
    "sept": 9,
    "sep": 9,
    "october": 10,
    "oct": 10,
    "november": 11,
    "nov": 11,
    "december": 12,
    "dec": 12,
}

DAY_NAMES = {
    "monday": 0,
    "tuesday": 1,
    "wednesday": 2,
    "thursday": 3,
    "friday": 4,
    "saturday": 5,
    "sunday": 6,
}

_MONTH_ALT = "|".join(sorted(MONTH_NAMES, key=len, reverse=True))
_ISO_DATE = re.compile(r"\b(\d{4})-(\d{1,2})-(\d{1,2})\b")
_SLASH_DATE = re.compile(r"\b(\d{1,2})/(\d{1,2})(?:/(\d{4}|\d{2}))?\b")
_MONTH_DAY = re.compile(
    rf"\b({_MONTH_ALT})\.?\s+(\d{{1,2}})(?:st|nd|rd|th)?\b(?:,?\s+(\d{{4}}))?"
)
_DAY_MONTH = re.compile(
    rf"\b(\d{{1,2}})(?:st|nd|rd|th)?\s+(?:of\s+)?({_MONTH_ALT})\b\.?(?:,?\s+(\d{{4}}))?"
)

_MERIDIEM_TIME = re.compile(r"\b(\d{1,2})(?:[:.](\d{2}))?\s*([ap])\.?\s*m\b\.?")
_OCLOCK_TIME = re.compile(r"\b(\d{1,2})\s*o['’]?\s?clock\b")
_CLOCK_TIME = re.compile(r"\b(\d{1,2}):(\d{2})\b")
_AT_HOUR = re.compile(r"\bat\s+(\d{1,2})\b(?!\s*[:/])")
_BARE_HOUR = re.compile(r"(?<![\d/:.])\b(\d{1,2})\b(?![/:]|\.\d)")


def parse_date(text: str, today: date | None = None) -> date | None:
    """Parse a calendar date from text. Returns date or None if not found."""
    if today is None:
        today = date.today()

    normalized = text.lower().strip()

    match = _ISO_DATE.search(normalized)
    if match:
        return _safe_date(int(match.group(1)), int(match.group(2)), int(match.group(3)))

    match = _SLASH_DATE.search(normalized)
    if match:
        first, second = int(match.group(1)), int(match.group(2))
        if first > 12:
            day, month = first, second
        elif second > 12:
            month, day = first, second
        else:
            month, day = first, second
        return _with_year(month, day, match.group(3), today)

    match = _MONTH_DAY.search(normalized)
    if match:
        return _with_year(MONTH_NAMES[match.group(1)], int(match.group(2)), match.group(3), today)

    match = _DAY_MONTH.search(normalized)
    if match:
        return _with_year(MONTH_NAMES[match.group(2)], int(match.group(1)), match.group(3), today)

    return _parse_relative_date(normalized, today)


def _parse_relative_date(normalized: str, today: date) -> date | None:
    if re.search(r"\btoday\b|\btonight\b", normalized):
        return today

    if re.search(r"\btomorrow\b", normalized):
        return today + timedelta(days=1)

    for day_name, day_num in DAY_NAMES.items():
        if re.search(rf"\b{day_name}\b", normalized):
            days_ahead = (day_num - today.weekday()) % 7
            if days_ahead == 0:
                days_ahead = 7
            if re.search(rf"\bnext\s+{day_name}\b", normalized) and days_ahead < 7:
                days_ahead += 7
            return today + timedelta(days=days_ahead)

    return None


def _with_year(month: int, day: int, year_text: str | None, today: date) -> date | None:
    if year_text:
        year = int(year_text)
        if year < 100:
            year += 2000
        return _safe_date(year, month, day)

    resolved = _safe_date(today.year, month, day)
    if resolved is None:
        # Feb 29 outside a leap year may still exist next year
        return _safe_date(today.year + 1, month, day)
    if resolved < today:
        return _safe_date(today.year + 1, month, day)
    return resolved


def _safe_date(year: int, month: int, day: int) -> date | None:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def read_clock_time(text: str, allow_bare_hour: bool = True) -> time | None:
    """
    Read a clock time without applying opening hours.

    "H:MM" without am/pm is a 24-hour reading; 12 o'clock is noon.
    allow_bare_hour=False restricts matching to explicit forms (am/pm,
    o'clock, H:MM) so date numbers in the same sentence are not taken as hours.
    """
    normalized = text.lower().strip()

    match = _MERIDIEM_TIME.search(normalized)
    if match:
        hour = int(match.group(1))
        minute = int(match.group(2) or 0)
        if not 1 <= hour <= 12:
            return None
        if match.group(3) == "p" and hour != 12:
            hour += 12
        elif match.group(3) == "a" and hour == 12:
            hour = 0
        return _safe_time(hour, minute)

    match = _OCLOCK_TIME.search(normalized)
    if match:
        hour = int(match.group(1))
        if 5 <= hour <= 11:
            hour += 12
        return _safe_time(hour, 0)

    match = _CLOCK_TIME.search(normalized)
    if match:
        hour, minute = int(match.group(1)), int(match.group(2))
        return _safe_time(hour, minute)

    if not allow_bare_hour:
        return None

    match = _AT_HOUR.search(normalized) or _BARE_HOUR.search(normalized)
    if match:
        hour = int(match.group(1))
        if 1 <= hour <= 11:
            return time(hour + 12, 0)
        if 12 <= hour <= 23:
            return time(hour, 0)

    return None


def parse_time(
    text: str,
    reference_date: date | None = None,
    allow_bare_hour: bool = True,
) -> time | None:
    """Parse a clock time that is bookable on reference_date (today if unset)."""
    if reference_date is None:
        reference_date = date.today()

    parsed = read_clock_time(text, allow_bare_hour=allow_bare_hour)
    if parsed is None or not is_open_at(reference_date, parsed):
        return None
    return parsed


def _safe_time(hour: int, minute: int) -> time | None:
    if 0 <= hour <= 23 and 0 <= minute <= 59:
        return time(hour, minute)
    return None


def opening_hours_for(day: date) -> tuple[time, time]:
    return OPENING_HOURS[day.weekday()]


def is_open_at(day: date, at: time) -> bool:
    opens, closes = opening_hours_for(day)
    return opens <= at <= closes


def describe_opening_hours(day: date) -> str:
    opens, closes = opening_hours_for(day)
    return f"{format_time(opens)} to {format_time(closes)}"


def resolve_instant(day: date, at: time, now: datetime, tz: tzinfo) -> datetime:
    """
    Combine date and time in the business timezone.
    A result that is not in the future means the guest meant the next
    occurrence: tomorrow if the date is today, otherwise the same date next year.
    """
    instant = datetime.combine(day, at, tzinfo=tz)
    if instant > now:
        return instant

    if day == now.astimezone(tz).date():
        return instant + timedelta(days=1)

    next_year = _safe_date(day.year + 1, day.month, day.day) or date(day.year + 1, 3, 1)
    return datetime.combine(next_year, at, tzinfo=tz)


def format_date(value: date) -> str:
    return f"{value.strftime('%A, %B')} {value.day}, {value.year}"


def format_time(value: time) -> str:
    return value.strftime("%I:%M %p").lstrip("0")
