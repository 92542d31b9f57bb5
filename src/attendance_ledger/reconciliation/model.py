from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional

from ..core.enums import AnomalyKind, TimingSignalKind, WorkState
from ..events.model import AttendanceEvent

Interval = tuple[datetime, datetime]


@dataclass(frozen=True)
class BreakInterval:
    start_event: AttendanceEvent
    end_event: Optional[AttendanceEvent] = None

    @property
    def start(self) -> datetime:
        return self.start_event.event_time

    @property
    def end(self) -> Optional[datetime]:
        return self.end_event.event_time if self.end_event else None

    @property
    def duration(self) -> Optional[timedelta]:
        if self.end is None:
            return None
        return self.end - self.start


@dataclass(frozen=True)
class Session:
    """A clock-in to clock-out span with its nested breaks.

    ``end_event`` is ``None`` when the input ran out while still working or on
    break; such a session is open and has no worked duration.
    """

    start_event: AttendanceEvent
    end_event: Optional[AttendanceEvent] = None
    breaks: tuple[BreakInterval, ...] = ()

    @property
    def start(self) -> datetime:
        return self.start_event.event_time

    @property
    def end(self) -> Optional[datetime]:
        return self.end_event.event_time if self.end_event else None

    @property
    def is_open(self) -> bool:
        return self.end_event is None

    def break_intervals(self) -> list[Interval]:
        return [(b.start, b.end) for b in self.breaks if b.end is not None]

    def working_intervals(self) -> list[Interval]:
        """Session span minus closed breaks. Empty for an open session."""

        if self.end is None:
            return []
        out: list[Interval] = []
        cursor = self.start
        for b_start, b_end in self.break_intervals():
            if b_start > cursor:
                out.append((cursor, b_start))
            cursor = max(cursor, b_end)
        if self.end > cursor:
            out.append((cursor, self.end))
        return out

    @property
    def worked(self) -> Optional[timedelta]:
        if self.is_open:
            return None
        return sum((end - start for start, end in self.working_intervals()), timedelta(0))

    @property
    def break_time(self) -> timedelta:
        return sum((end - start for start, end in self.break_intervals()), timedelta(0))


@dataclass(frozen=True)
class AnomalyWarning:
    """An event that was not a valid transition from ``state``.

    Not an error: the event stays in the ledger and the summary is still
    produced. ``session_start`` is the clock-in of the session that was open
    when the anomaly happened, if any.
    """

    event: AttendanceEvent
    state: WorkState
    kind: AnomalyKind
    message: str
    session_start: Optional[AttendanceEvent] = None


@dataclass(frozen=True)
class TimingSignal:
    event: AttendanceEvent
    kind: TimingSignalKind
    delta: timedelta


@dataclass(frozen=True)
class Replay:
    sessions: tuple[Session, ...]
    anomalies: tuple[AnomalyWarning, ...]
    final_state: WorkState


@dataclass(frozen=True)
class DailySummary:
    user_id: str
    date: date
    zone: str
    attribution: str
    sessions: tuple[Session, ...] = ()
    total_worked: timedelta = timedelta(0)
    total_break: timedelta = timedelta(0)
    anomalies: tuple[AnomalyWarning, ...] = ()
    timing_signals: tuple[TimingSignal, ...] = ()
    incomplete: bool = False

    @property
    def is_anomalous(self) -> bool:
        return bool(self.anomalies)
