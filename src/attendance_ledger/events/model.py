from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..core.enums import EventType


@dataclass(frozen=True)
class AttendanceEvent:
    """Domain entity: one raw, write-once ledger row.

    ``event_time`` is the client-asserted business time (kept in the offset it
    was submitted with), ``recorded_at`` the server receipt time and
    ``created_at`` the store write time. None is derived from another.
    """

    id: str
    user_id: str
    event_type: EventType
    event_time: datetime
    recorded_at: datetime
    created_at: datetime

    @property
    def sort_key(self) -> tuple:
        return (self.event_time, self.recorded_at, self.created_at, self.id)


def chronological(events) -> list[AttendanceEvent]:
    """Replay order: event_time, then recorded_at, then created_at, then id."""
    return sorted(events, key=lambda e: e.sort_key)


def recent_first(events) -> list[AttendanceEvent]:
    return sorted(events, key=lambda e: e.sort_key, reverse=True)
