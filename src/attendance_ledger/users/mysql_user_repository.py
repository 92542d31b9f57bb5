from __future__ import annotations

from datetime import datetime
from typing import Optional

from mysql.connector.errors import IntegrityError

from ..common.datetime_utils import from_naive_utc, to_naive_utc
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, translate_integrity_error
from .model import User
from .repository import UserRepository

_USER_COLUMNS = "id, name, email, picture, created_at, updated_at, deleted_at"


def _to_user(row: dict) -> User:
    deleted_at = row.get("deleted_at")
    return User(
        id=str(row["id"]),
        name=row["name"],
        email=row["email"],
        picture=row.get("picture"),
        created_at=from_naive_utc(row["created_at"]),
        updated_at=from_naive_utc(row["updated_at"]),
        deleted_at=from_naive_utc(deleted_at) if deleted_at else None,
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: str, *, include_deleted: bool = False) -> Optional[User]:
        sql = f"SELECT {_USER_COLUMNS} FROM users WHERE id=%s"
        if not include_deleted:
            sql += " AND deleted_at IS NULL"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, (user_id,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_active_by_email(self, email: str) -> Optional[User]:
        # Same unique index the insert path is checked against.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE active_email=%s", (email,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def create_user(self, *, user_id: str, name: str, email: str, picture: Optional[str], now: datetime) -> User:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO users(id, name, email, picture, created_at, updated_at)
                    VALUES(%s,%s,%s,%s,%s,%s)
                    """,
                    (user_id, name, email, picture, to_naive_utc(now), to_naive_utc(now)),
                )
                cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE id=%s", (user_id,))
                return _to_user(fetchone(cur))
        except IntegrityError as exc:
            raise translate_integrity_error(
                exc, conflict_message=f"An active user with email {email} already exists"
            ) from exc

    def update_profile(
        self,
        *,
        user_id: str,
        name: Optional[str],
        email: Optional[str],
        picture: Optional[str],
        now: datetime,
        clear_picture: bool = False,
    ) -> Optional[User]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    UPDATE users
                    SET name=COALESCE(%s, name),
                        email=COALESCE(%s, email),
                        picture=CASE WHEN %s THEN NULL ELSE COALESCE(%s, picture) END,
                        updated_at=%s
                    WHERE id=%s AND deleted_at IS NULL
                    """,
                    (name, email, clear_picture, picture, to_naive_utc(now), user_id),
                )
                if cur.rowcount == 0:
                    return None
                cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE id=%s", (user_id,))
                return _to_user(fetchone(cur))
        except IntegrityError as exc:
            raise translate_integrity_error(
                exc, conflict_message=f"An active user with email {email} already exists"
            ) from exc

    def soft_delete(self, user_id: str, *, now: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE users
                SET deleted_at=%s, updated_at=%s
                WHERE id=%s AND deleted_at IS NULL
                """,
                (to_naive_utc(now), to_naive_utc(now), user_id),
            )
            return cur.rowcount > 0

    def hard_delete(self, user_id: str) -> Optional[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id FROM users WHERE id=%s FOR UPDATE", (user_id,))
            if not fetchone(cur):
                return None
            cur.execute("SELECT COUNT(*) AS n FROM attendance_events WHERE user_id=%s", (user_id,))
            removed = int(fetchone(cur)["n"])
            cur.execute("DELETE FROM users WHERE id=%s", (user_id,))
            return removed
