"""Select the sessions to report and kill."""

import logging
from datetime import datetime, timedelta
from typing import Iterable, NamedTuple, Protocol

from .policy import Policy
from .sessions import SessionRecord, whole_minutes

logger = logging.getLogger(__name__)


class Killer(Protocol):
    def kill(self, pid: int) -> None: ...


class Summary(NamedTuple):
    considered: int
    killed: int


def format_age(age: timedelta) -> str:
    # drop the microseconds, they are only noise in the logs
    return str(timedelta(seconds=int(age.total_seconds())))


def log_record(record: SessionRecord, age: timedelta, verbose: bool) -> None:
    if not verbose:
        logger.info("pid %d idle for %s", record.process_id, format_age(age))
        return
    logger.info(
        "pid %d idle for %s\n"
        "    database id:       %d\n"
        "    backend start:     %s\n"
        "    transaction start: %s\n"
        "    query start:       %s\n"
        "    state change:      %s\n"
        "    query:             %s",
        record.process_id,
        format_age(age),
        record.database_id,
        record.backend_start,
        record.transaction_start,
        record.query_start,
        record.state_change,
        record.query_text,
    )


def process(
    records: Iterable[SessionRecord], policy: Policy, killer: Killer, now: datetime | None = None
) -> Summary:
    """
    Walk the records, oldest first, and apply the policy.

    Records younger than the minimum age are skipped. The display cap stops the
    walk; the kill cap only limits the kills. Under dry run the kills are logged
    and counted but the killer is never called.
    """
    considered = 0
    killed = 0
    for record in records:
        age = record.age(now)
        if whole_minutes(age) < policy.minimum_age_minutes:
            continue
        if policy.display_cap is not None and considered >= policy.display_cap:
            logger.debug("display cap of %d reached", policy.display_cap)
            break
        log_record(record, age, policy.verbose)
        if policy.kill_enabled and (policy.kill_cap is None or killed < policy.kill_cap):
            if policy.dry_run:
                logger.info("dry run: would kill %d", record.process_id)
            else:
                logger.info("killing %d", record.process_id)
                killer.kill(record.process_id)
            killed += 1
        considered += 1

    logger.info(
        "considered %d idle in transaction session(s), killed %d%s",
        considered,
        killed,
        " (dry run)" if policy.dry_run and killed else "",
    )
    return Summary(considered, killed)
