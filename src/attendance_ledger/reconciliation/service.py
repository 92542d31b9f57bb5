from __future__ import annotations

from datetime import date, timedelta

from ..common.datetime_utils import iter_dates
from ..core.constants import RECONCILE_WINDOW_DAYS
from ..core.exceptions import NotFoundError
from ..temporal.index import TemporalIndex, check_date_range
from ..users.repository import UserRepository
from .engine import ReconciliationEngine
from .model import DailySummary


class AttendanceSummaryService:
    """Use case: "what happened on day D in zone Z" for one user.

    Fetches a window one day wider on each side so that shifts crossing
    midnight are replayed whole, then lets the engine attribute them.
    Soft-deleted users keep their history and can still be reported on.
    """

    def __init__(self, users: UserRepository, index: TemporalIndex, engine: ReconciliationEngine):
        self._users = users
        self._index = index
        self._engine = engine

    def daily_summary(self, user_id: str, zone: str | None, day: date) -> DailySummary:
        return self.summaries_for_range(user_id, zone, day, day)[0]

    def summaries_for_range(self, user_id: str, zone: str | None, start: date, end: date) -> list[DailySummary]:
        check_date_range(start, end)
        if not self._users.get_by_id(user_id, include_deleted=True):
            raise NotFoundError(f"User with id {user_id} not found")

        tz = self._index.zones.resolve(zone)
        window = timedelta(days=RECONCILE_WINDOW_DAYS)
        events = self._index.events_between(user_id, tz, start - window, end + window)
        return self._engine.summarize_range(user_id, events, iter_dates(start, end), tz)
