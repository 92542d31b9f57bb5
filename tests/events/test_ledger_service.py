from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from attendance_ledger.core.enums import EventType
from attendance_ledger.core.exceptions import NotFoundError, ValidationError
from attendance_ledger.events.service import EventLedgerService

JST = timezone(timedelta(hours=9))


@pytest.fixture
def user(container):
    return container.identity_service.create_user("Alice", "alice@example.com")


def test_append_fills_recorded_at_and_keeps_offset(container, user):
    event_time = datetime(2026, 3, 2, 9, 0, 0, 123456, tzinfo=JST)

    event = container.ledger_service.append_event(user.id, "clockIn", event_time)

    assert event.event_type is EventType.CLOCK_IN
    assert event.event_time == event_time
    assert event.event_time.utcoffset() == timedelta(hours=9)
    assert event.event_time.microsecond == 123456
    assert event.recorded_at.tzinfo is not None
    assert event.created_at >= event.recorded_at


def test_append_uses_injected_clock(events_repo, container, user, fixed_now):
    ledger = EventLedgerService(events_repo, container.zones, clock=lambda: fixed_now)

    event = ledger.append_event(user.id, EventType.BREAK_START, fixed_now - timedelta(hours=2))

    assert event.recorded_at == fixed_now


def test_append_for_unknown_user_is_not_found(container, fixed_now):
    with pytest.raises(NotFoundError):
        container.ledger_service.append_event("nobody", "clock_in", fixed_now)


def test_append_allowed_for_soft_deleted_user(container, user, fixed_now):
    container.identity_service.soft_delete_user(user.id)

    event = container.ledger_service.append_event(user.id, "clock_out", fixed_now)

    assert event.user_id == user.id


@pytest.mark.parametrize("event_type", ["clock_on", "", None, 3])
def test_append_rejects_unknown_event_type(container, user, fixed_now, event_type, events_repo):
    with pytest.raises(ValidationError):
        container.ledger_service.append_event(user.id, event_type, fixed_now)
    assert events_repo.list_for_user(user.id) == []


def test_append_rejects_naive_or_missing_event_time(container, user):
    with pytest.raises(ValidationError):
        container.ledger_service.append_event(user.id, "clock_in", datetime(2026, 3, 2, 9, 0))
    with pytest.raises(ValidationError):
        container.ledger_service.append_event(user.id, "clock_in", None)


def test_retroactive_event_is_accepted_and_prior_events_untouched(container, user, fixed_now):
    ledger = container.ledger_service
    first = ledger.append_event(user.id, "clock_in", fixed_now)
    before = ledger.get_event(first.id)

    ledger.append_event(user.id, "clock_in", fixed_now - timedelta(days=3))

    after = ledger.get_event(first.id)
    assert after == before
    assert after.created_at == first.created_at


def test_history_is_recent_first_and_range_is_half_open(container, user, fixed_now):
    ledger = container.ledger_service
    times = [fixed_now + timedelta(hours=h) for h in (0, 3, 8)]
    for kind, when in zip(("clock_in", "break_start", "clock_out"), times):
        ledger.append_event(user.id, kind, when)

    history = ledger.list_events_for_user(user.id)
    assert [e.event_time for e in history] == sorted(times, reverse=True)

    window = ledger.list_events_for_user(user.id, from_event_time=times[0], to_event_time=times[2])
    assert [e.event_type for e in window] == [EventType.BREAK_START, EventType.CLOCK_IN]

    assert len(ledger.list_events_for_user(user.id, limit=1)) == 1


def test_history_rejects_inverted_range(container, user, fixed_now):
    with pytest.raises(ValidationError):
        container.ledger_service.list_events_for_user(
            user.id, from_event_time=fixed_now, to_event_time=fixed_now - timedelta(hours=1)
        )


def test_get_event_missing(container):
    with pytest.raises(NotFoundError):
        container.ledger_service.get_event("missing")


def test_ledger_exposes_no_mutation():
    assert not hasattr(EventLedgerService, "update_event")
    assert not hasattr(EventLedgerService, "delete_event")
