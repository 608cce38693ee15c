"""Turn the invocation options into a run policy."""

from dataclasses import dataclass
from typing import Any

from .constants import DEFAULT_MIN_AGE_MINUTES
from .errors import InvalidArgument


@dataclass(frozen=True)
class Policy:
    minimum_age_minutes: int = DEFAULT_MIN_AGE_MINUTES
    # None means no limit
    display_cap: int | None = None
    kill_cap: int | None = None
    kill_enabled: bool = False
    dry_run: bool = False
    verbose: bool = False


def parse_count(name: str, value: Any) -> int | None:
    """Parse a non-negative integer option. None is passed through."""
    if value is None:
        return None
    if isinstance(value, bool):
        raise InvalidArgument(f"{name} must be an integer, got {value!r}")
    try:
        count = int(value)
    except (TypeError, ValueError):
        raise InvalidArgument(f"{name} must be an integer, got {value!r}") from None
    if count < 0:
        raise InvalidArgument(f"{name} must not be negative, got {count}")
    return count


def resolve_policy(options) -> Policy:
    """
    Build a fully defaulted Policy from the parsed command line options.

    `options` is anything with the attributes produced by `cli.parse_args()`;
    missing attributes take their default value.
    """
    min_age = parse_count("min-age", getattr(options, "min_age", None))
    return Policy(
        minimum_age_minutes=DEFAULT_MIN_AGE_MINUTES if min_age is None else min_age,
        display_cap=parse_count("max-cnt", getattr(options, "max_cnt", None)),
        kill_cap=parse_count("max", getattr(options, "max_killed", None)),
        kill_enabled=bool(getattr(options, "kill", False)),
        dry_run=bool(getattr(options, "dry_run", False)),
        verbose=bool(getattr(options, "debug", False)),
    )
