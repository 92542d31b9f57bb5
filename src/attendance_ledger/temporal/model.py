from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..events.model import AttendanceEvent


@dataclass(frozen=True)
class DayBucket:
    """Events whose ``event_time`` falls on ``date`` in the queried zone."""

    date: date
    events: tuple[AttendanceEvent, ...]
