"""cleaniit: clean up idle in transaction PostgreSQL sessions."""

__version__ = "0.1.0"

from .policy import Policy, resolve_policy
from .selector import Summary, process
from .sessions import SessionRecord, fetch_idle_sessions

__all__ = ["Policy", "SessionRecord", "Summary", "fetch_idle_sessions", "process", "resolve_policy"]
