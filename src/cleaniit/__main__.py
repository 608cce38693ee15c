"""Entry point for cleaniit."""

import logging
import sys

from .cli import parse_args, setup_logger
from .db import session
from .errors import CleaniitError, InvalidArgument
from .killer import ProcessKiller
from .policy import resolve_policy
from .selector import process
from .sessions import fetch_idle_sessions


def main(argv=None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    try:
        setup_logger(args.log_level)
        policy = resolve_policy(args)
        killer = ProcessKiller(args.kill_command)
    except InvalidArgument as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    try:
        with session(args.dsn) as (conn, lock):
            records = fetch_idle_sessions(conn, lock)
            process(records, policy, killer)
    except CleaniitError as e:
        logging.error("error: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
