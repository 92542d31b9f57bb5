from __future__ import annotations

from datetime import date, timedelta, tzinfo

from ...common.datetime_utils import day_bounds_utc, local_date
from ...core.enums import DayAttribution
from ..model import Interval, Session
from .base import DayAttributionPolicy


def _clipped(intervals: list[Interval], lower, upper) -> timedelta:
    total = timedelta(0)
    for start, end in intervals:
        s, e = max(start, lower), min(end, upper)
        if e > s:
            total += e - s
    return total


class MidnightSplitPolicy(DayAttributionPolicy):
    """Sessions are cut at local midnight; each day keeps the part inside it."""

    name = DayAttribution.MIDNIGHT_SPLIT.value

    def includes(self, session: Session, day: date, zone: tzinfo) -> bool:
        if session.is_open:
            return local_date(session.start, zone) == day
        lower, upper = day_bounds_utc(day, day, zone)
        return session.start < upper and session.end > lower

    def worked_on(self, session: Session, day: date, zone: tzinfo) -> timedelta:
        lower, upper = day_bounds_utc(day, day, zone)
        return _clipped(session.working_intervals(), lower, upper)

    def break_on(self, session: Session, day: date, zone: tzinfo) -> timedelta:
        lower, upper = day_bounds_utc(day, day, zone)
        return _clipped(session.break_intervals(), lower, upper)
