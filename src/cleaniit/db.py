"""Database connection bootstrap."""

import logging
import threading
from contextlib import contextmanager

import psycopg2

from .constants import WATCHDOG_INTERVAL
from .errors import DatabaseConnectionError

logger = logging.getLogger(__name__)


def connect(dsn: str = ""):
    """
    Open a read-only, autocommit connection.

    Autocommit keeps this tool from showing up as an idle in transaction
    session itself. Everything missing from dsn is taken by libpq from the
    PG* environment variables and ~/.pgpass.
    """
    try:
        conn = psycopg2.connect(dsn)
        conn.set_session(readonly=True, autocommit=True)
    except psycopg2.Error as e:
        raise DatabaseConnectionError(f"can't connect to the database: {e}".strip()) from e
    return conn


class ConnectionWatchdog(threading.Thread):
    """
    Log a connection error if the link to the server drops.

    libpq doesn't support two threads on one connection: the watchdog only
    polls while it holds `lock`, and skips the tick when the main thread holds
    it for a query.
    """

    def __init__(self, conn, lock: threading.Lock, interval: float = WATCHDOG_INTERVAL):
        super().__init__(name="connection-watchdog", daemon=True)
        self.conn = conn
        self.lock = lock
        self.interval = interval
        self._stopped = threading.Event()

    def check(self) -> bool:
        """Poll the connection once. Return False when the link is gone."""
        if not self.lock.acquire(blocking=False):
            return True
        try:
            if self.conn.closed:
                raise psycopg2.InterfaceError("connection already closed")
            self.conn.poll()
        except psycopg2.Error as e:
            if not self._stopped.is_set():
                logger.error("connection error: %s", e)
            return False
        finally:
            self.lock.release()
        return True

    def run(self):
        while not self._stopped.wait(self.interval):
            if not self.check():
                return

    def stop(self):
        self._stopped.set()


@contextmanager
def session(dsn: str = "", watchdog_interval: float = WATCHDOG_INTERVAL):
    """
    Connect and watch the connection. To be used in a with statement.

    Yields the connection and the lock to hold while using it.
    """
    conn = connect(dsn)
    lock = threading.Lock()
    watchdog = ConnectionWatchdog(conn, lock, watchdog_interval)
    watchdog.start()
    try:
        yield conn, lock
    finally:
        watchdog.stop()
        with lock:
            conn.close()
