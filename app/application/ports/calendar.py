from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from app.domain.entities.calendar_event import CalendarEvent


class CalendarPort(ABC):
    @abstractmethod
    def list_events(self, time_min: datetime, time_max: datetime) -> list[CalendarEvent]:
        """List events overlapping [time_min, time_max). Raises CalendarError."""
        raise NotImplementedError

    @abstractmethod
    def create_event(
        self,
        summary: str,
        description: str,
        start: datetime,
        end: datetime,
    ) -> str:
        """Create calendar event. Returns event_id. Raises CalendarError."""
        raise NotImplementedError
