"""Custom exception hierarchy for assetmanager.

Everything raised by the data-access layer is a DatabaseError. The
subclasses exist for logging and diagnostics; callers outside the core
normally catch the base class.
"""


class DatabaseError(Exception):
    """Base for all database operation failures."""


class DatabaseConnectionError(DatabaseError):
    """The database file could not be created or opened."""


class StatementError(DatabaseError):
    """An SQL statement could not be prepared."""


class BindError(DatabaseError):
    """A parameter could not be bound to a statement."""


class ExecutionError(DatabaseError):
    """A prepared statement failed while executing."""


class QueryError(DatabaseError):
    """A single-value query was invalid."""


class TransactionError(DatabaseError):
    """BEGIN, COMMIT or ROLLBACK failed."""

    def __init__(self, operation: str, reason: str = "") -> None:
        self.operation = operation
        message = f"Failed to {operation} transaction"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class InvalidArgumentError(DatabaseError, ValueError):
    """An argument was rejected before touching the database."""
