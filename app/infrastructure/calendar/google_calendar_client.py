from __future__ import annotations

import logging
from datetime import date, datetime, time, timezone, tzinfo
from typing import Any
from urllib.parse import quote
from zoneinfo import ZoneInfo

import httpx

from app.application.exceptions import CalendarError
from app.application.ports.calendar import CalendarPort
from app.core.config import settings
from app.domain.entities.calendar_event import CalendarEvent


class GoogleCalendar(CalendarPort):
    """Google Calendar v3 over REST with a bearer access token."""

    def __init__(
        self,
        access_token: str | None = None,
        calendar_id: str | None = None,
        base_url: str | None = None,
        time_zone: str | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._access_token = access_token or settings.GOOGLE_ACCESS_TOKEN
        self._calendar_id = calendar_id or settings.GOOGLE_CALENDAR_ID
        self._base_url = (base_url or settings.GOOGLE_CALENDAR_BASE_URL).rstrip("/")
        self._time_zone = time_zone or settings.BUSINESS_TIMEZONE
        self._client = client or httpx.Client(timeout=10.0)
        self._logger = logging.getLogger(__name__)

        if not self._access_token:
            raise ValueError("GOOGLE_ACCESS_TOKEN is required for Google Calendar")

    @property
    def _events_url(self) -> str:
        return f"{self._base_url}/calendars/{quote(self._calendar_id, safe='')}/events"

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._access_token}"}

    def list_events(self, time_min: datetime, time_max: datetime) -> list[CalendarEvent]:
        params = {
            "timeMin": time_min.isoformat(),
            "timeMax": time_max.isoformat(),
            "singleEvents": "true",
            "orderBy": "startTime",
        }
        try:
            response = self._client.get(self._events_url, params=params, headers=self._headers())
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            self._logger.error("Error listing calendar events", extra={"error": str(e)})
            raise CalendarError(f"Google Calendar list failed: {e}") from e

        events: list[CalendarEvent] = []
        for item in data.get("items", []) or []:
            if item.get("status") == "cancelled":
                continue
            event = _to_event(item, ZoneInfo(self._time_zone))
            if event is not None:
                events.append(event)
        return events

    def create_event(
        self,
        summary: str,
        description: str,
        start: datetime,
        end: datetime,
    ) -> str:
        payload = {
            "summary": summary,
            "description": description,
            "start": {"dateTime": start.isoformat(), "timeZone": self._time_zone},
            "end": {"dateTime": end.isoformat(), "timeZone": self._time_zone},
        }
        try:
            response = self._client.post(
                self._events_url,
                json=payload,
                headers={**self._headers(), "Content-Type": "application/json"},
            )
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            self._logger.error("Error creating calendar event", extra={"error": str(e)})
            raise CalendarError(f"Google Calendar insert failed: {e}") from e

        event_id = data.get("id")
        if not event_id:
            raise CalendarError("No event ID returned from Google Calendar API")

        self._logger.info("Calendar event created", extra={"reservation_id": event_id})
        return str(event_id)


def _to_event(item: dict[str, Any], tz: tzinfo) -> CalendarEvent | None:
    start = _parse_boundary(item.get("start") or {}, tz)
    end = _parse_boundary(item.get("end") or {}, tz)
    if start is None or end is None:
        return None
    return CalendarEvent(
        id=str(item.get("id") or ""),
        start=start,
        end=end,
        summary=item.get("summary") or "",
        description=item.get("description") or "",
    )


def _parse_boundary(value: dict[str, Any], tz: tzinfo) -> datetime | None:
    if value.get("dateTime"):
        try:
            parsed = datetime.fromisoformat(str(value["dateTime"]).replace("Z", "+00:00"))
        except ValueError:
            return None
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    if value.get("date"):
        # all-day events block the whole day
        try:
            day = date.fromisoformat(str(value["date"]))
        except ValueError:
            return None
        return datetime.combine(day, time.min, tzinfo=tz)
    return None
