"""Shared fixtures for the cleaniit tests."""

from datetime import datetime, timedelta, timezone

import pytest

from cleaniit.errors import ActuationError
from cleaniit.sessions import SessionRecord

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


class FakeKiller:
    """Record the pids it is asked to kill instead of running anything."""

    def __init__(self, fail_on=None):
        self.calls = []
        self.fail_on = fail_on

    def kill(self, pid):
        if self.fail_on is not None and pid == self.fail_on:
            raise ActuationError(f"unable to kill {pid}")
        self.calls.append(pid)


def make_record(pid, age_minutes, now=NOW, query="SELECT 1"):
    state_change = now - timedelta(minutes=age_minutes)
    return SessionRecord(
        database_id=16384,
        process_id=pid,
        query_text=query,
        backend_start=state_change - timedelta(hours=1),
        transaction_start=state_change - timedelta(minutes=1),
        query_start=state_change - timedelta(seconds=10),
        state_change=state_change,
    )


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def killer():
    return FakeKiller()


@pytest.fixture
def records():
    """Five sessions, oldest first, idle for 200, 150, 130, 100 and 50 minutes."""
    return [make_record(pid, age) for pid, age in zip(range(1, 6), [200, 150, 130, 100, 50])]
