from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import local_date, now_utc, require_aware
from ..common.zones import ZoneRegistry
from ..core.enums import EventType
from ..core.exceptions import NotFoundError, ValidationError
from .model import AttendanceEvent
from .repository import EventRepository

logger = logging.getLogger(__name__)


class EventLedgerService:
    """Use case: accept raw attendance events and serve them back for audit.

    The ledger accepts every well-formed submission, including retroactive and
    out-of-order ones. Whether an event makes sense is decided later by
    reconciliation, never here.
    """

    def __init__(
        self,
        events: EventRepository,
        zones: ZoneRegistry,
        *,
        clock: Callable[[], datetime] = now_utc,
        id_factory: Callable[[], str] | None = None,
    ):
        self._events = events
        self._zones = zones
        self._clock = clock
        self._id_factory = id_factory or (lambda: str(uuid.uuid4()))

    def append_event(
        self,
        user_id: str,
        event_type: EventType | str,
        event_time: datetime,
        recorded_at: Optional[datetime] = None,
    ) -> AttendanceEvent:
        if not isinstance(user_id, str) or not user_id.strip():
            raise ValidationError("user_id is required")
        try:
            kind = EventType.parse(event_type)
        except ValueError:
            raise ValidationError(f"Unknown event type: {event_type!r}") from None
        event_time = require_aware(event_time, "event_time")
        recorded_at = require_aware(recorded_at, "recorded_at") if recorded_at is not None else self._clock()

        event = self._events.append(
            event_id=self._id_factory(),
            user_id=user_id.strip(),
            event_type=kind,
            event_time=event_time,
            recorded_at=recorded_at,
            org_local_date=local_date(event_time, self._zones.organization),
            org_zone=self._zones.organization.key,
        )
        logger.info("[ledger] appended %s %s for user %s", event.event_type.value, event.id, event.user_id)
        return event

    def get_event(self, event_id: str) -> AttendanceEvent:
        event = self._events.get_by_id(event_id)
        if not event:
            raise NotFoundError(f"Attendance event with id {event_id} not found")
        return event

    def list_events_for_user(
        self,
        user_id: str,
        *,
        from_event_time: Optional[datetime] = None,
        to_event_time: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> Sequence[AttendanceEvent]:
        """Raw history, most recent ``event_time`` first. Omit both bounds for full history."""

        if from_event_time is not None:
            require_aware(from_event_time, "from")
        if to_event_time is not None:
            require_aware(to_event_time, "to")
        if from_event_time and to_event_time and from_event_time > to_event_time:
            raise ValidationError("from must not be after to")
        if limit is not None and int(limit) <= 0:
            raise ValidationError("limit must be positive")

        return self._events.list_for_user(
            user_id,
            from_event_time=from_event_time,
            to_event_time=to_event_time,
            limit=int(limit) if limit is not None else None,
        )
