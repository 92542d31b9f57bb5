from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from ..events.model import AttendanceEvent
from ..reconciliation.model import AnomalyWarning, BreakInterval, DailySummary, Session, TimingSignal
from ..temporal.model import DayBucket
from ..users.model import User


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _seconds(value: Optional[timedelta]) -> Optional[int]:
    return int(value.total_seconds()) if value is not None else None


def user_to_dict(user: User) -> dict:
    # deleted_at stays internal; callers only ever see active users here.
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "picture": user.picture,
        "created_at": _iso(user.created_at),
        "updated_at": _iso(user.updated_at),
    }


def event_to_dict(event: AttendanceEvent) -> dict:
    return {
        "id": event.id,
        "user_id": event.user_id,
        "event_type": event.event_type.value,
        "event_time": _iso(event.event_time),
        "recorded_at": _iso(event.recorded_at),
        "created_at": _iso(event.created_at),
    }


def _break_to_dict(b: BreakInterval) -> dict:
    return {
        "start": _iso(b.start),
        "end": _iso(b.end),
        "duration_seconds": _seconds(b.duration),
    }


def _session_to_dict(s: Session) -> dict:
    return {
        "clock_in_event_id": s.start_event.id,
        "clock_out_event_id": s.end_event.id if s.end_event else None,
        "start": _iso(s.start),
        "end": _iso(s.end),
        "open": s.is_open,
        "worked_seconds": _seconds(s.worked),
        "breaks": [_break_to_dict(b) for b in s.breaks],
    }


def _anomaly_to_dict(a: AnomalyWarning) -> dict:
    return {
        "kind": a.kind.value,
        "message": a.message,
        "state": a.state.value,
        "event_id": a.event.id,
        "event_type": a.event.event_type.value,
        "event_time": _iso(a.event.event_time),
    }


def _signal_to_dict(t: TimingSignal) -> dict:
    return {
        "kind": t.kind.value,
        "event_id": t.event.id,
        "delta_seconds": t.delta.total_seconds(),
    }


def summary_to_dict(summary: DailySummary) -> dict:
    return {
        "user_id": summary.user_id,
        "date": summary.date.isoformat(),
        "zone": summary.zone,
        "attribution": summary.attribution,
        "sessions": [_session_to_dict(s) for s in summary.sessions],
        "total_worked_seconds": _seconds(summary.total_worked),
        "total_break_seconds": _seconds(summary.total_break),
        "anomalies": [_anomaly_to_dict(a) for a in summary.anomalies],
        "timing_signals": [_signal_to_dict(t) for t in summary.timing_signals],
        "incomplete": summary.incomplete,
        "anomalous": summary.is_anomalous,
    }


def bucket_to_dict(bucket: DayBucket) -> dict:
    return {
        "date": bucket.date.isoformat(),
        "events": [event_to_dict(e) for e in bucket.events],
    }
