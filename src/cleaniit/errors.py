"""Errors raised by cleaniit. All of them are fatal for the run."""


class CleaniitError(Exception):
    pass


class InvalidArgument(CleaniitError):
    """An invocation option has an unusable value."""


class DatabaseConnectionError(CleaniitError):
    """The database can't be reached, or the query can't be executed."""


class DataShapeError(CleaniitError):
    """A fetched row doesn't match the expected columns."""


class ActuationError(CleaniitError):
    """The external kill command can't be started."""
