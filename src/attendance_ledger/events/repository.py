from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence
from zoneinfo import ZoneInfo

from ..core.enums import EventType
from .model import AttendanceEvent


class EventRepository(Protocol):
    """Append-only ledger interface.

    There is deliberately no update or delete here: rows only disappear
    through the cascade when their owning user is purged.
    """

    def append(
        self,
        *,
        event_id: str,
        user_id: str,
        event_type: EventType,
        event_time: datetime,
        recorded_at: datetime,
        org_local_date: date,
        org_zone: str,
    ) -> AttendanceEvent:
        """Raises ``NotFoundError`` when ``user_id`` does not reference a user row."""

        raise NotImplementedError

    def get_by_id(self, event_id: str) -> Optional[AttendanceEvent]:
        raise NotImplementedError

    def list_for_user(
        self,
        user_id: str,
        *,
        from_event_time: Optional[datetime] = None,
        to_event_time: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> Sequence[AttendanceEvent]:
        """Half-open ``[from, to)`` range, most recent ``event_time`` first."""

        raise NotImplementedError

    def list_for_user_on_local_dates(
        self, user_id: str, *, zone: ZoneInfo, start_date: date, end_date: date
    ) -> Sequence[AttendanceEvent]:
        """Events on local dates ``start_date..end_date`` in ``zone``, most recent first.

        Rows whose ``org_zone`` is ``zone`` are matched on the stored local date;
        rows written under any other organization zone are matched on the UTC
        range of those dates. The result always equals a range scan over
        ``day_bounds_utc(start_date, end_date, zone)``.
        """

        raise NotImplementedError
