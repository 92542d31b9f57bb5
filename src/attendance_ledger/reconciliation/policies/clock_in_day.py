from __future__ import annotations

from datetime import date, timedelta, tzinfo

from ...common.datetime_utils import local_date
from ...core.enums import DayAttribution
from ..model import AnomalyWarning, Session
from .base import DayAttributionPolicy


class ClockInDayPolicy(DayAttributionPolicy):
    """Whole session belongs to the local date of its clock-in, never split."""

    name = DayAttribution.CLOCK_IN_DAY.value

    def includes(self, session: Session, day: date, zone: tzinfo) -> bool:
        return local_date(session.start, zone) == day

    def worked_on(self, session: Session, day: date, zone: tzinfo) -> timedelta:
        return session.worked or timedelta(0)

    def break_on(self, session: Session, day: date, zone: tzinfo) -> timedelta:
        return session.break_time

    def anomaly_day(self, anomaly: AnomalyWarning, zone: tzinfo) -> date:
        if anomaly.session_start is not None:
            return local_date(anomaly.session_start.event_time, zone)
        return local_date(anomaly.event.event_time, zone)
