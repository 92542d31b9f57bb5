from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from attendance_ledger.core.enums import AnomalyKind, TimingSignalKind, WorkState
from attendance_ledger.reconciliation.engine import ReconciliationEngine, replay, timing_signals
from attendance_ledger.reconciliation.policies.midnight_split import MidnightSplitPolicy

UTC = ZoneInfo("UTC")
TOKYO = ZoneInfo("Asia/Tokyo")
DAY = date(2026, 3, 2)


def at(hour: int, minute: int = 0, *, day: date = DAY, tz=timezone.utc) -> datetime:
    return datetime(day.year, day.month, day.day, hour, minute, tzinfo=tz)


def test_standard_day_with_one_break(make_event):
    events = [
        make_event("clockIn", at(9)),
        make_event("breakStart", at(12)),
        make_event("breakEnd", at(12, 30)),
        make_event("clockOut", at(17, 30)),
    ]

    summary = ReconciliationEngine().summarize("u1", events, DAY, UTC)

    assert len(summary.sessions) == 1
    assert summary.total_worked == timedelta(hours=8)
    assert summary.total_break == timedelta(minutes=30)
    assert summary.sessions[0].breaks[0].duration == timedelta(minutes=30)
    assert summary.anomalies == ()
    assert not summary.incomplete


def test_duplicate_clock_in_is_reported_not_fatal(make_event):
    events = [
        make_event("clockIn", at(9)),
        make_event("clockIn", at(10)),
        make_event("clockOut", at(17)),
    ]

    summary = ReconciliationEngine().summarize("u1", events, DAY, UTC)

    assert [a.kind for a in summary.anomalies] == [AnomalyKind.DUPLICATE_CLOCK_IN]
    assert summary.anomalies[0].state is WorkState.WORKING
    assert summary.sessions[0].end == at(17)
    assert summary.total_worked == timedelta(hours=8)
    assert summary.is_anomalous


def test_input_order_does_not_matter(make_event):
    events = [
        make_event("clockOut", at(17, 30)),
        make_event("breakEnd", at(12, 30)),
        make_event("clockIn", at(9)),
        make_event("breakStart", at(12)),
    ]

    result = replay(events)

    assert result.anomalies == ()
    assert result.sessions[0].worked == timedelta(hours=8)
    assert result.final_state is WorkState.IDLE


def test_ties_are_broken_by_recorded_at(make_event):
    same = at(9)
    clock_out = make_event("clockOut", same, recorded_at=at(9, 5))
    clock_in = make_event("clockIn", same, recorded_at=at(9, 1))

    result = replay([clock_out, clock_in])

    assert result.anomalies == ()
    assert result.sessions[0].start_event is clock_in
    assert result.sessions[0].worked == timedelta(0)


@pytest.mark.parametrize(
    "kinds,expected",
    [
        (["clockOut"], [AnomalyKind.CLOCK_OUT_WITHOUT_CLOCK_IN]),
        (["breakEnd"], [AnomalyKind.BREAK_END_WITHOUT_BREAK_START]),
        (["breakStart"], [AnomalyKind.BREAK_START_OUTSIDE_SESSION]),
        (["clockIn", "breakEnd", "clockOut"], [AnomalyKind.BREAK_END_WITHOUT_BREAK_START]),
        (["clockIn", "breakStart", "breakStart", "breakEnd", "clockOut"], [AnomalyKind.DUPLICATE_BREAK_START]),
        (["clockIn", "breakStart", "clockIn", "breakEnd", "clockOut"], [AnomalyKind.CLOCK_IN_DURING_BREAK]),
    ],
)
def test_invalid_transitions_become_anomalies(make_event, kinds, expected):
    events = [make_event(kind, at(8 + i)) for i, kind in enumerate(kinds)]

    result = replay(events)

    assert [a.kind for a in result.anomalies] == expected
    assert result.final_state is WorkState.IDLE


def test_clock_out_during_break_leaves_session_open(make_event):
    events = [
        make_event("clockIn", at(9)),
        make_event("breakStart", at(12)),
        make_event("clockOut", at(17)),
    ]

    summary = ReconciliationEngine().summarize("u1", events, DAY, UTC)

    assert [a.kind for a in summary.anomalies] == [
        AnomalyKind.CLOCK_OUT_DURING_BREAK,
        AnomalyKind.UNCLOSED_SESSION,
    ]
    assert summary.incomplete
    assert summary.sessions[0].is_open
    assert summary.total_worked == timedelta(0)


def test_missing_clock_out_marks_summary_incomplete(make_event):
    summary = ReconciliationEngine().summarize("u1", [make_event("clockIn", at(9))], DAY, UTC)

    assert summary.incomplete
    assert summary.sessions[0].worked is None
    assert [a.kind for a in summary.anomalies] == [AnomalyKind.UNCLOSED_SESSION]


def test_empty_input_yields_empty_summary():
    summary = ReconciliationEngine().summarize("u1", [], DAY, UTC)

    assert summary.sessions == ()
    assert summary.total_worked == timedelta(0)
    assert not summary.incomplete
    assert not summary.is_anomalous


def test_two_sessions_in_one_day(make_event):
    events = [
        make_event("clockIn", at(8)),
        make_event("clockOut", at(12)),
        make_event("clockIn", at(13)),
        make_event("clockOut", at(18)),
    ]

    summary = ReconciliationEngine().summarize("u1", events, DAY, UTC)

    assert len(summary.sessions) == 2
    assert summary.total_worked == timedelta(hours=9)


def test_session_crossing_midnight_belongs_to_clock_in_day(make_event):
    jst = timezone(timedelta(hours=9))
    events = [
        make_event("clockIn", datetime(2026, 3, 2, 23, 30, tzinfo=jst)),
        make_event("clockOut", datetime(2026, 3, 3, 0, 15, tzinfo=jst)),
    ]
    engine = ReconciliationEngine()

    day1 = engine.summarize("u1", events, date(2026, 3, 2), TOKYO)
    day2 = engine.summarize("u1", events, date(2026, 3, 3), TOKYO)

    assert day1.total_worked == timedelta(minutes=45)
    assert len(day1.sessions) == 1
    assert day2.sessions == ()
    assert day2.anomalies == ()
    assert day2.total_worked == timedelta(0)


def test_midnight_split_policy_divides_the_session(make_event):
    jst = timezone(timedelta(hours=9))
    events = [
        make_event("clockIn", datetime(2026, 3, 2, 23, 30, tzinfo=jst)),
        make_event("breakStart", datetime(2026, 3, 2, 23, 50, tzinfo=jst)),
        make_event("breakEnd", datetime(2026, 3, 3, 0, 5, tzinfo=jst)),
        make_event("clockOut", datetime(2026, 3, 3, 0, 15, tzinfo=jst)),
    ]
    engine = ReconciliationEngine(policy=MidnightSplitPolicy())

    day1 = engine.summarize("u1", events, date(2026, 3, 2), TOKYO)
    day2 = engine.summarize("u1", events, date(2026, 3, 3), TOKYO)

    assert day1.total_worked == timedelta(minutes=20)
    assert day1.total_break == timedelta(minutes=10)
    assert day2.total_worked == timedelta(minutes=10)
    assert day2.total_break == timedelta(minutes=5)
    assert day1.attribution == "midnight_split"


def test_anomaly_inside_overnight_session_is_reported_on_both_days(make_event):
    jst = timezone(timedelta(hours=9))
    events = [
        make_event("clockIn", datetime(2026, 3, 2, 23, 30, tzinfo=jst)),
        make_event("clockIn", datetime(2026, 3, 3, 0, 5, tzinfo=jst)),
        make_event("clockOut", datetime(2026, 3, 3, 0, 15, tzinfo=jst)),
    ]
    engine = ReconciliationEngine()

    day1 = engine.summarize("u1", events, date(2026, 3, 2), TOKYO)
    day2 = engine.summarize("u1", events, date(2026, 3, 3), TOKYO)

    assert [a.kind for a in day1.anomalies] == [AnomalyKind.DUPLICATE_CLOCK_IN]
    # The stray clock-in happened on day two, so that day is flagged as well.
    assert [a.kind for a in day2.anomalies] == [AnomalyKind.DUPLICATE_CLOCK_IN]
    assert day2.sessions == ()


def test_timing_signals_flag_late_and_future_submissions(make_event):
    late = make_event("clockIn", at(9), recorded_at=at(15))
    future = make_event("clockOut", at(17), recorded_at=at(12))
    on_time = make_event("breakStart", at(12), recorded_at=at(12, 1))

    signals = timing_signals([late, future, on_time], timedelta(minutes=5))

    assert [(s.event.id, s.kind) for s in signals] == [
        (late.id, TimingSignalKind.LATE_SUBMISSION),
        (future.id, TimingSignalKind.FUTURE_DATED),
    ]
    assert signals[0].delta == timedelta(hours=6)


def test_timing_signals_flag_storage_delay(make_event):
    slow = make_event("clockIn", at(9), recorded_at=at(9), created_at=at(9, 30))

    (signal,) = timing_signals([slow], timedelta(minutes=5))

    assert signal.kind is TimingSignalKind.STORAGE_DELAY


def test_timing_signals_do_not_count_as_anomalies(make_event):
    events = [
        make_event("clockIn", at(9), recorded_at=at(18)),
        make_event("clockOut", at(17), recorded_at=at(17, 2)),
    ]

    summary = ReconciliationEngine().summarize("u1", events, DAY, UTC)

    assert len(summary.timing_signals) == 1
    assert not summary.is_anomalous
    assert summary.total_worked == timedelta(hours=8)
