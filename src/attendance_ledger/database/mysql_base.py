from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from ..core.exceptions import ConflictError, NotFoundError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def translate_integrity_error(
    exc: IntegrityError,
    *,
    conflict_message: str = "Resource already exists",
    missing_message: str = "Referenced resource does not exist",
) -> Exception:
    """Map store constraint violations onto domain errors.

    The unique index and the foreign key are the only serialization points,
    so their errno is the authoritative answer to "duplicate" and "unknown".
    """

    if exc.errno == errorcode.ER_DUP_ENTRY:
        logger.warning("[db] unique constraint rejected write: %s", exc.msg)
        return ConflictError(conflict_message)
    if exc.errno in (errorcode.ER_NO_REFERENCED_ROW, errorcode.ER_NO_REFERENCED_ROW_2):
        logger.info("[db] foreign key rejected write: %s", exc.msg)
        return NotFoundError(missing_message)
    return exc
