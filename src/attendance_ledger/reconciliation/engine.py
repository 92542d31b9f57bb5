from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta, tzinfo
from typing import Iterable, Optional

from ..common.datetime_utils import local_date
from ..core.constants import DEFAULT_SKEW_TOLERANCE_SECONDS
from ..core.enums import AnomalyKind, EventType, TimingSignalKind, WorkState
from ..events.model import AttendanceEvent, chronological
from .model import AnomalyWarning, BreakInterval, DailySummary, Replay, Session, TimingSignal
from .policies.base import DayAttributionPolicy
from .policies.clock_in_day import ClockInDayPolicy

logger = logging.getLogger(__name__)

_TRANSITIONS: dict[tuple[WorkState, EventType], WorkState] = {
    (WorkState.IDLE, EventType.CLOCK_IN): WorkState.WORKING,
    (WorkState.WORKING, EventType.BREAK_START): WorkState.ON_BREAK,
    (WorkState.ON_BREAK, EventType.BREAK_END): WorkState.WORKING,
    (WorkState.WORKING, EventType.CLOCK_OUT): WorkState.IDLE,
}

_ANOMALIES: dict[tuple[WorkState, EventType], tuple[AnomalyKind, str]] = {
    (WorkState.WORKING, EventType.CLOCK_IN): (AnomalyKind.DUPLICATE_CLOCK_IN, "clock-in while already working"),
    (WorkState.ON_BREAK, EventType.CLOCK_IN): (AnomalyKind.CLOCK_IN_DURING_BREAK, "clock-in while on break"),
    (WorkState.IDLE, EventType.CLOCK_OUT): (AnomalyKind.CLOCK_OUT_WITHOUT_CLOCK_IN, "clock-out without clock-in"),
    (WorkState.ON_BREAK, EventType.CLOCK_OUT): (AnomalyKind.CLOCK_OUT_DURING_BREAK, "clock-out while on break"),
    (WorkState.IDLE, EventType.BREAK_START): (AnomalyKind.BREAK_START_OUTSIDE_SESSION, "break start outside a session"),
    (WorkState.ON_BREAK, EventType.BREAK_START): (AnomalyKind.DUPLICATE_BREAK_START, "break start while already on break"),
    (WorkState.IDLE, EventType.BREAK_END): (AnomalyKind.BREAK_END_WITHOUT_BREAK_START, "break end outside a session"),
    (WorkState.WORKING, EventType.BREAK_END): (AnomalyKind.BREAK_END_WITHOUT_BREAK_START, "break end without break start"),
}


@dataclass
class _OpenSession:
    start_event: AttendanceEvent
    breaks: list[BreakInterval] = field(default_factory=list)
    break_start: Optional[AttendanceEvent] = None

    def close(self, end_event: Optional[AttendanceEvent]) -> Session:
        breaks = list(self.breaks)
        if self.break_start is not None:
            breaks.append(BreakInterval(start_event=self.break_start))
        return Session(start_event=self.start_event, end_event=end_event, breaks=tuple(breaks))


def replay(events: Iterable[AttendanceEvent]) -> Replay:
    """Drive the Idle/Working/OnBreak machine over ``events``.

    Pure and total: invalid transitions become anomalies and leave the state
    unchanged, and input that ends mid-session yields an open session.
    """

    state = WorkState.IDLE
    current: Optional[_OpenSession] = None
    sessions: list[Session] = []
    anomalies: list[AnomalyWarning] = []

    for event in chronological(events):
        next_state = _TRANSITIONS.get((state, event.event_type))
        if next_state is None:
            kind, message = _ANOMALIES[(state, event.event_type)]
            anomalies.append(
                AnomalyWarning(
                    event=event,
                    state=state,
                    kind=kind,
                    message=message,
                    session_start=current.start_event if current else None,
                )
            )
            continue

        if event.event_type is EventType.CLOCK_IN:
            current = _OpenSession(start_event=event)
        elif event.event_type is EventType.BREAK_START:
            current.break_start = event
        elif event.event_type is EventType.BREAK_END:
            current.breaks.append(BreakInterval(start_event=current.break_start, end_event=event))
            current.break_start = None
        elif event.event_type is EventType.CLOCK_OUT:
            sessions.append(current.close(event))
            current = None
        state = next_state

    if current is not None:
        sessions.append(current.close(None))
        anomalies.append(
            AnomalyWarning(
                event=current.start_event,
                state=state,
                kind=AnomalyKind.UNCLOSED_SESSION,
                message="session has no clock-out",
                session_start=current.start_event,
            )
        )

    return Replay(sessions=tuple(sessions), anomalies=tuple(anomalies), final_state=state)


def timing_signals(events: Iterable[AttendanceEvent], tolerance: timedelta) -> list[TimingSignal]:
    """Flag divergence between event_time, recorded_at and created_at."""

    out: list[TimingSignal] = []
    for event in chronological(events):
        lag = event.recorded_at - event.event_time
        if lag > tolerance:
            out.append(TimingSignal(event=event, kind=TimingSignalKind.LATE_SUBMISSION, delta=lag))
        elif lag < -tolerance:
            out.append(TimingSignal(event=event, kind=TimingSignalKind.FUTURE_DATED, delta=lag))

        storage_lag = event.created_at - event.recorded_at
        if abs(storage_lag) > tolerance:
            out.append(TimingSignal(event=event, kind=TimingSignalKind.STORAGE_DELAY, delta=storage_lag))
    return out


class ReconciliationEngine:
    """Turn a user's raw events into a per-day summary.

    Holds no state between calls; a summary can be recomputed from the
    ledger at any time.
    """

    def __init__(
        self,
        *,
        policy: DayAttributionPolicy | None = None,
        skew_tolerance: timedelta = timedelta(seconds=DEFAULT_SKEW_TOLERANCE_SECONDS),
    ):
        self._policy = policy or ClockInDayPolicy()
        self._skew_tolerance = skew_tolerance

    @property
    def policy(self) -> DayAttributionPolicy:
        return self._policy

    def summarize(self, user_id: str, events: Iterable[AttendanceEvent], day: date, zone: tzinfo) -> DailySummary:
        """Summary for ``day``; ``events`` should span the neighbouring days too."""

        events = list(events)
        result = replay(events)
        return self._summary_from_replay(user_id, result, events, day, zone)

    def summarize_range(
        self, user_id: str, events: Iterable[AttendanceEvent], days: Iterable[date], zone: tzinfo
    ) -> list[DailySummary]:
        events = list(events)
        result = replay(events)
        return [self._summary_from_replay(user_id, result, events, day, zone) for day in days]

    def _summary_from_replay(
        self, user_id: str, result: Replay, events: list[AttendanceEvent], day: date, zone: tzinfo
    ) -> DailySummary:
        policy = self._policy
        sessions = tuple(s for s in result.sessions if policy.includes(s, day, zone))
        anomalies = tuple(
            a
            for a in result.anomalies
            if local_date(a.event.event_time, zone) == day or policy.anomaly_day(a, zone) == day
        )
        todays_events = [e for e in events if local_date(e.event_time, zone) == day]

        summary = DailySummary(
            user_id=user_id,
            date=day,
            zone=getattr(zone, "key", str(zone)),
            attribution=policy.name,
            sessions=sessions,
            total_worked=sum((policy.worked_on(s, day, zone) for s in sessions), timedelta(0)),
            total_break=sum((policy.break_on(s, day, zone) for s in sessions), timedelta(0)),
            anomalies=anomalies,
            timing_signals=tuple(timing_signals(todays_events, self._skew_tolerance)),
            incomplete=any(s.is_open for s in sessions),
        )
        if summary.anomalies:
            logger.warning(
                "[reconcile] user %s on %s has %d anomalies: %s",
                user_id,
                day.isoformat(),
                len(summary.anomalies),
                ", ".join(a.kind.value for a in summary.anomalies),
            )
        return summary
