from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta


@dataclass(frozen=True)
class ReservationRecord:
    name: str
    email: str
    start: datetime
    party_size: int
    special_requests: str = ""
    phone: str | None = None
    duration_minutes: int = 120
    booking_key: str = ""

    @property
    def end(self) -> datetime:
        return self.start + timedelta(minutes=self.duration_minutes)
