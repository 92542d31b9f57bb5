from __future__ import annotations

import itertools
from datetime import date, datetime, timedelta, timezone
from typing import Optional

import pytest

from attendance_ledger.common.datetime_utils import day_bounds_utc, to_utc
from attendance_ledger.container import build_services
from attendance_ledger.core.enums import EventType
from attendance_ledger.core.exceptions import ConflictError, NotFoundError
from attendance_ledger.events.model import AttendanceEvent, recent_first
from attendance_ledger.users.model import User


class InMemoryUsers:
    """Keeps an active-email index that is checked and written in one step, like a unique key."""

    def __init__(self):
        self._rows: dict[str, User] = {}
        self._active_email: dict[str, str] = {}
        self.events: Optional["InMemoryEvents"] = None

    def get_by_id(self, user_id: str, *, include_deleted: bool = False) -> Optional[User]:
        user = self._rows.get(user_id)
        if user and (include_deleted or user.is_active):
            return user
        return None

    def get_active_by_email(self, email: str) -> Optional[User]:
        user_id = self._active_email.get(email)
        return self._rows[user_id] if user_id else None

    def create_user(self, *, user_id, name, email, picture, now) -> User:
        if email in self._active_email:
            raise ConflictError(f"An active user with email {email} already exists")
        user = User(id=user_id, name=name, email=email, picture=picture, created_at=now, updated_at=now)
        self._rows[user_id] = user
        self._active_email[email] = user_id
        return user

    def update_profile(self, *, user_id, name, email, picture, now, clear_picture=False) -> Optional[User]:
        user = self.get_by_id(user_id)
        if not user:
            return None
        if email is not None and email != user.email:
            if email in self._active_email:
                raise ConflictError(f"An active user with email {email} already exists")
            del self._active_email[user.email]
            self._active_email[email] = user_id
        updated = User(
            id=user.id,
            name=name if name is not None else user.name,
            email=email if email is not None else user.email,
            picture=None if clear_picture else (picture if picture is not None else user.picture),
            created_at=user.created_at,
            updated_at=now,
        )
        self._rows[user_id] = updated
        return updated

    def soft_delete(self, user_id: str, *, now) -> bool:
        user = self.get_by_id(user_id)
        if not user:
            return False
        self._rows[user_id] = User(
            id=user.id,
            name=user.name,
            email=user.email,
            picture=user.picture,
            created_at=user.created_at,
            updated_at=now,
            deleted_at=now,
        )
        del self._active_email[user.email]
        return True

    def hard_delete(self, user_id: str) -> Optional[int]:
        user = self._rows.pop(user_id, None)
        if not user:
            return None
        if self._active_email.get(user.email) == user_id:
            del self._active_email[user.email]
        return self.events.cascade_user(user_id) if self.events else 0


class InMemoryEvents:
    def __init__(self, users: InMemoryUsers):
        self._users = users
        self._rows: dict[str, AttendanceEvent] = {}
        self._org_dates: dict[str, tuple[str, date]] = {}
        self.store_lag = timedelta(microseconds=250)
        users.events = self

    def append(
        self, *, event_id, user_id, event_type, event_time, recorded_at, org_local_date, org_zone
    ) -> AttendanceEvent:
        if self._users.get_by_id(user_id, include_deleted=True) is None:
            raise NotFoundError(f"User with id {user_id} not found")
        event = AttendanceEvent(
            id=event_id,
            user_id=user_id,
            event_type=event_type,
            event_time=event_time,
            recorded_at=to_utc(recorded_at),
            created_at=to_utc(recorded_at) + self.store_lag,
        )
        self._rows[event_id] = event
        self._org_dates[event_id] = (org_zone, org_local_date)
        return event

    def get_by_id(self, event_id: str) -> Optional[AttendanceEvent]:
        return self._rows.get(event_id)

    def list_for_user(self, user_id, *, from_event_time=None, to_event_time=None, limit=None):
        rows = [
            e
            for e in self._rows.values()
            if e.user_id == user_id
            and (from_event_time is None or e.event_time >= from_event_time)
            and (to_event_time is None or e.event_time < to_event_time)
        ]
        rows = recent_first(rows)
        return rows[:limit] if limit is not None else rows

    def list_for_user_on_local_dates(self, user_id, *, zone, start_date, end_date):
        lower, upper = day_bounds_utc(start_date, end_date, zone)
        rows = []
        for e in self._rows.values():
            if e.user_id != user_id:
                continue
            stored_zone, stored_date = self._org_dates[e.id]
            if stored_zone == zone.key:
                matched = start_date <= stored_date <= end_date
            else:
                matched = lower <= e.event_time < upper
            if matched:
                rows.append(e)
        return recent_first(rows)

    def cascade_user(self, user_id: str) -> int:
        doomed = [k for k, e in self._rows.items() if e.user_id == user_id]
        for key in doomed:
            del self._rows[key]
            del self._org_dates[key]
        return len(doomed)


@pytest.fixture
def users_repo():
    return InMemoryUsers()


@pytest.fixture
def events_repo(users_repo):
    return InMemoryEvents(users_repo)


@pytest.fixture
def container(users_repo, events_repo):
    return build_services(
        users_repo=users_repo,
        events_repo=events_repo,
        organization_zone="Asia/Tokyo",
        allowed_zones=["UTC", "Asia/Tokyo", "America/New_York"],
    )


@pytest.fixture
def fixed_now():
    return datetime(2026, 3, 2, 9, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_event():
    """Build ledger events directly, for engine tests that need no repository."""

    counter = itertools.count(1)

    def _make(kind: EventType | str, when: datetime, *, user_id: str = "u1", recorded_at=None, created_at=None, event_id=None):
        recorded = recorded_at or when
        return AttendanceEvent(
            id=event_id or f"e{next(counter):04d}",
            user_id=user_id,
            event_type=EventType.parse(kind),
            event_time=when,
            recorded_at=recorded,
            created_at=created_at or recorded,
        )

    return _make
