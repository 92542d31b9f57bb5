from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Sequence
from zoneinfo import ZoneInfo

from ..common.datetime_utils import day_bounds_utc, iter_dates, local_date
from ..common.zones import ZoneRegistry
from ..core.constants import MAX_BUCKET_RANGE_DAYS
from ..core.exceptions import ValidationError
from ..events.model import AttendanceEvent, chronological
from ..events.repository import EventRepository
from .model import DayBucket


class TemporalIndex:
    """Translate "days D1..D2 in zone Z" into ledger ranges and bucket the result.

    Buckets are computed at query time from ``event_time`` converted into the
    requested zone, so the same event in the same zone always lands on the
    same date. Sessions are never merged here.
    """

    def __init__(self, events: EventRepository, zones: ZoneRegistry):
        self._events = events
        self._zones = zones

    @property
    def zones(self) -> ZoneRegistry:
        return self._zones

    def day_buckets_for_user(self, user_id: str, zone: str | None, start: date, end: date) -> list[DayBucket]:
        tz = self._zones.resolve(zone)
        check_date_range(start, end)

        events = self.events_between(user_id, tz, start, end)
        grouped: dict[date, list[AttendanceEvent]] = defaultdict(list)
        for event in events:
            grouped[local_date(event.event_time, tz)].append(event)

        return [DayBucket(date=day, events=tuple(chronological(grouped.get(day, ())))) for day in iter_dates(start, end)]

    def events_between(self, user_id: str, tz: ZoneInfo, start: date, end: date) -> Sequence[AttendanceEvent]:
        """Events on local dates ``start..end`` in ``tz``, in replay order."""

        if self._zones.is_organization(tz):
            rows = self._events.list_for_user_on_local_dates(user_id, zone=tz, start_date=start, end_date=end)
        else:
            lower, upper = day_bounds_utc(start, end, tz)
            rows = self._events.list_for_user(user_id, from_event_time=lower, to_event_time=upper)
        return chronological(rows)


def check_date_range(start: date, end: date) -> None:
    if start > end:
        raise ValidationError("start date must not be after end date")
    if (end - start).days + 1 > MAX_BUCKET_RANGE_DAYS:
        raise ValidationError(f"date range is limited to {MAX_BUCKET_RANGE_DAYS} days")
