"""Constants and defaults for cleaniit."""

# pg_stat_activity.state of a session holding an open transaction without running a statement
IDLE_IN_TRANSACTION = "idle in transaction"

DEFAULT_MIN_AGE_MINUTES = 120
DEFAULT_LOG_LEVEL = "info"
DEFAULT_KILL_COMMAND = "sudo /bin/kill -TERM {pid}"

# seconds between two liveness checks of the database connection
WATCHDOG_INTERVAL = 5.0

IDLE_SESSIONS_QUERY = """
    SELECT datid, pid, query, backend_start, xact_start, query_start, state_change
    FROM pg_stat_activity
    WHERE
        state = %s
        AND pid <> pg_backend_pid()
    ORDER BY state_change
"""
