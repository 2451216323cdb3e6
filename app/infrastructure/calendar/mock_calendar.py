from __future__ import annotations

import logging
from datetime import datetime

from app.application.exceptions import CalendarError
from app.application.ports.calendar import CalendarPort
from app.domain.entities.calendar_event import CalendarEvent


class MockCalendar(CalendarPort):
    def __init__(self, fail_on_list: bool = False, fail_on_create: bool = False) -> None:
        self._events: dict[str, CalendarEvent] = {}
        self._fail_on_list = fail_on_list
        self._fail_on_create = fail_on_create
        self._logger = logging.getLogger(__name__)

    @property
    def events(self) -> list[CalendarEvent]:
        return list(self._events.values())

    def list_events(self, time_min: datetime, time_max: datetime) -> list[CalendarEvent]:
        if self._fail_on_list:
            raise CalendarError("Mock calendar unavailable")
        return [event for event in self._events.values() if event.start < time_max and event.end > time_min]

    def create_event(
        self,
        summary: str,
        description: str,
        start: datetime,
        end: datetime,
    ) -> str:
        if self._fail_on_create:
            raise CalendarError("Mock calendar rejected the event")

        event_id = f"mockevent{len(self._events) + 1:04d}"
        self._events[event_id] = CalendarEvent(
            id=event_id,
            start=start,
            end=end,
            summary=summary,
            description=description,
        )
        self._logger.info(
            "Mock calendar event created",
            extra={"reservation_id": event_id},
        )
        return event_id
