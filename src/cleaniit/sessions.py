"""Fetch the idle in transaction sessions from pg_stat_activity."""

import logging
from contextlib import nullcontext
from dataclasses import dataclass
from datetime import datetime, timedelta

import psycopg2

from .constants import IDLE_IN_TRANSACTION, IDLE_SESSIONS_QUERY
from .errors import DatabaseConnectionError, DataShapeError

logger = logging.getLogger(__name__)

COLUMNS = ("datid", "pid", "query", "backend_start", "xact_start", "query_start", "state_change")


def whole_minutes(age: timedelta) -> int:
    return int(age.total_seconds() // 60)


@dataclass(frozen=True)
class SessionRecord:
    database_id: int
    process_id: int
    query_text: str
    backend_start: datetime
    transaction_start: datetime
    query_start: datetime
    state_change: datetime

    def age(self, now: datetime | None = None) -> timedelta:
        """Time spent idle since the last state change, computed at call time."""
        if now is None:
            now = datetime.now().astimezone()
        return now - self.state_change

    def age_minutes(self, now: datetime | None = None) -> int:
        return whole_minutes(self.age(now))


def _integer(column, value, unsigned=False) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise DataShapeError(f"column {column}: expected an integer, got {value!r}")
    if unsigned and value < 0:
        raise DataShapeError(f"column {column}: expected an unsigned integer, got {value}")
    return value


def _timestamp(column, value) -> datetime:
    if not isinstance(value, datetime):
        raise DataShapeError(f"column {column}: expected a timestamp, got {value!r}")
    # naive values are taken as local time
    return value.astimezone()


def decode_row(row) -> SessionRecord:
    """Map one result row to a SessionRecord, checking arity and types."""
    if row is None or len(row) != len(COLUMNS):
        raise DataShapeError(f"expected {len(COLUMNS)} columns, got {row!r}")
    datid, pid, query, backend_start, xact_start, query_start, state_change = row
    if query is None:
        query = ""
    elif not isinstance(query, str):
        raise DataShapeError(f"column query: expected a string, got {query!r}")
    return SessionRecord(
        database_id=_integer("datid", datid, unsigned=True),
        process_id=_integer("pid", pid),
        query_text=query,
        backend_start=_timestamp("backend_start", backend_start),
        transaction_start=_timestamp("xact_start", xact_start),
        query_start=_timestamp("query_start", query_start),
        state_change=_timestamp("state_change", state_change),
    )


def fetch_idle_sessions(conn, lock=None) -> list[SessionRecord]:
    """
    Return the idle in transaction sessions, oldest state change first.

    The callers rely on that order: the caps applied later keep the sessions
    which have been idle the longest. `lock`, when given, is held while the
    connection is in use.
    """
    try:
        with lock or nullcontext(), conn.cursor() as cur:
            cur.execute(IDLE_SESSIONS_QUERY, (IDLE_IN_TRANSACTION,))
            rows = cur.fetchall()
    except psycopg2.Error as e:
        raise DatabaseConnectionError(f"can't query pg_stat_activity: {e}") from e
    logger.debug("%d idle in transaction session(s) found", len(rows))
    return [decode_row(row) for row in rows]
