from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence
from zoneinfo import ZoneInfo

from mysql.connector.errors import IntegrityError

from ..common.datetime_utils import day_bounds_utc, from_naive_utc, offset_minutes, to_naive_utc, with_offset
from ..core.enums import EventType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, translate_integrity_error
from .model import AttendanceEvent
from .repository import EventRepository

_EVENT_COLUMNS = "id, user_id, event_type, event_time, event_time_offset_minutes, recorded_at, created_at"
_RECENT_FIRST = "ORDER BY event_time DESC, recorded_at DESC, created_at DESC, id DESC"


def _to_event(row: dict) -> AttendanceEvent:
    return AttendanceEvent(
        id=str(row["id"]),
        user_id=str(row["user_id"]),
        event_type=EventType(row["event_type"]),
        event_time=with_offset(from_naive_utc(row["event_time"]), int(row.get("event_time_offset_minutes") or 0)),
        recorded_at=from_naive_utc(row["recorded_at"]),
        created_at=from_naive_utc(row["created_at"]),
    )


class MySQLEventRepository(EventRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        # created_at is left to the column default so the store stamps it.
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_events(
                        id, user_id, event_type, event_time, event_time_offset_minutes,
                        org_local_date, org_zone, recorded_at
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        event_id,
                        user_id,
                        event_type.value,
                        to_naive_utc(event_time),
                        offset_minutes(event_time),
                        org_local_date,
                        org_zone,
                        to_naive_utc(recorded_at),
                    ),
                )
                cur.execute(f"SELECT {_EVENT_COLUMNS} FROM attendance_events WHERE id=%s", (event_id,))
                return _to_event(fetchone(cur))
        except IntegrityError as exc:
            raise translate_integrity_error(exc, missing_message=f"User with id {user_id} not found") from exc

    def get_by_id(self, event_id: str) -> Optional[AttendanceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_EVENT_COLUMNS} FROM attendance_events WHERE id=%s", (event_id,))
            row = fetchone(cur)
            return _to_event(row) if row else None

    def list_for_user(
        self,
        user_id: str,
        *,
        from_event_time: Optional[datetime] = None,
        to_event_time: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> Sequence[AttendanceEvent]:
        clauses = ["user_id=%s"]
        params: list[object] = [user_id]

        if from_event_time is not None:
            clauses.append("event_time >= %s")
            params.append(to_naive_utc(from_event_time))
        if to_event_time is not None:
            clauses.append("event_time < %s")
            params.append(to_naive_utc(to_event_time))

        sql = f"SELECT {_EVENT_COLUMNS} FROM attendance_events WHERE {' AND '.join(clauses)} {_RECENT_FIRST}"
        if limit is not None:
            sql += " LIMIT %s"
            params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_event(r) for r in fetchall(cur)]

    def list_for_user_on_local_dates(
        self, user_id: str, *, zone: ZoneInfo, start_date: date, end_date: date
    ) -> Sequence[AttendanceEvent]:
        lower, upper = day_bounds_utc(start_date, end_date, zone)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_EVENT_COLUMNS}
                FROM attendance_events
                WHERE user_id=%s
                  AND (
                    (org_zone=%s AND org_local_date BETWEEN %s AND %s)
                    OR (org_zone<>%s AND event_time >= %s AND event_time < %s)
                  )
                {_RECENT_FIRST}
                """,
                (
                    user_id,
                    zone.key,
                    start_date,
                    end_date,
                    zone.key,
                    to_naive_utc(lower),
                    to_naive_utc(upper),
                ),
            )
            return [_to_event(r) for r in fetchall(cur)]
