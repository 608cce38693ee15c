"""Command-line argument parsing and logging setup."""

import argparse
import logging
import os

from .constants import DEFAULT_KILL_COMMAND, DEFAULT_LOG_LEVEL, DEFAULT_MIN_AGE_MINUTES
from .errors import InvalidArgument


def parse_args(argv=None) -> argparse.Namespace:
    """Parse the arguments and return them."""
    parser = argparse.ArgumentParser(prog="cleaniit", description="Clean up idle in transaction processes")
    parser.add_argument(
        "--log-level",
        default=os.environ.get("CLEANIIT_LOG", DEFAULT_LOG_LEVEL),
        help="Log level, general or per logger: LEVEL or LEVEL,logger=LEVEL,... "
        "(levels: debug, info, warning, error)",
    )
    parser.add_argument("-d", "--debug", action="store_true", help="Log all the fields of each session")
    parser.add_argument("-k", "--kill", action="store_true", help="Kill idle in transaction processes")
    # the numeric options are validated by resolve_policy()
    parser.add_argument(
        "-a",
        "--min-age",
        metavar="MINUTES",
        help=f"Minimum age in minutes of a process since its last state change (default: {DEFAULT_MIN_AGE_MINUTES})",
    )
    parser.add_argument("-m", "--max", dest="max_killed", metavar="COUNT", help="Max number of processes killed")
    parser.add_argument("-c", "--max-cnt", metavar="COUNT", help="Max number of processes considered")
    parser.add_argument("-n", "--dry-run", action="store_true", help="Dry run - don't kill anything")
    parser.add_argument(
        "--dsn",
        default=os.environ.get("CLEANIIT_DSN", ""),
        help="libpq connection string; unset parameters come from the PG* environment variables",
    )
    parser.add_argument(
        "--kill-command",
        default=os.environ.get("CLEANIIT_KILL_COMMAND", DEFAULT_KILL_COMMAND),
        help=f"Command used to kill a process, {{pid}} is replaced by its pid (default: {DEFAULT_KILL_COMMAND!r})",
    )
    return parser.parse_args(argv)


def parse_level(name: str) -> int:
    level = logging.getLevelName(name.strip().upper())
    if not isinstance(level, int):
        raise InvalidArgument(f"unknown log level {name!r}")
    return level


def parse_log_level(log_level: str) -> tuple[int, dict[str, int]]:
    """Parse 'LEVEL,logger=LEVEL,...' into the root level and the per logger levels."""
    root_level = parse_level(DEFAULT_LOG_LEVEL)
    levels = {}
    for item in log_level.split(","):
        if not item.strip():
            continue
        if "=" in item:
            name, level = item.split("=", 1)
            if not name.strip():
                raise InvalidArgument(f"missing logger name in {item!r}")
            levels[name.strip()] = parse_level(level)
        else:
            root_level = parse_level(item)
    return root_level, levels


def setup_logger(log_level: str = DEFAULT_LOG_LEVEL):
    root_level, levels = parse_log_level(log_level)
    logging.basicConfig(
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        level=root_level,
    )
    for name, level in levels.items():
        logging.getLogger(name).setLevel(level)
