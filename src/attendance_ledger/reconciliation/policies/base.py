from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date, timedelta, tzinfo

from ...common.datetime_utils import local_date
from ..model import AnomalyWarning, Session


class DayAttributionPolicy(ABC):
    """Strategy Pattern: decide which calendar day(s) a session counts towards."""

    name: str = ""

    @abstractmethod
    def includes(self, session: Session, day: date, zone: tzinfo) -> bool:
        raise NotImplementedError

    @abstractmethod
    def worked_on(self, session: Session, day: date, zone: tzinfo) -> timedelta:
        raise NotImplementedError

    @abstractmethod
    def break_on(self, session: Session, day: date, zone: tzinfo) -> timedelta:
        raise NotImplementedError

    def anomaly_day(self, anomaly: AnomalyWarning, zone: tzinfo) -> date:
        return local_date(anomaly.event.event_time, zone)
