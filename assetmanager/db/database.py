"""Database — the single owner of a SQLite connection.

All SQL text and every parameter binding in assetmanager goes through a
Database instance. The handle is created by the bootstrap code and passed
explicitly to whatever needs it; it is never shared through a global.

Transactions are controlled explicitly with BEGIN / COMMIT / ROLLBACK.
The driver runs in autocommit mode so it never opens one behind our back,
and nested transactions are rejected rather than silently merged.
"""

from __future__ import annotations

import logging
import re
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Mapping

from assetmanager.exceptions import (
    BindError,
    DatabaseConnectionError,
    DatabaseError,
    ExecutionError,
    QueryError,
    StatementError,
    TransactionError,
)

_logger = logging.getLogger(__name__)

# Values SQLite can store without an adapter.
_SCALAR_TYPES = (type(None), int, float, str, bytes)

# SQLite INTEGER is a signed 64-bit value.
_INT_MIN = -(2 ** 63)
_INT_MAX = 2 ** 63 - 1

# String literals, quoted identifiers and comments: placeholders inside
# these are not placeholders.
_NON_CODE_RE = re.compile(
    r"'(?:[^']|'')*'"
    r'|"(?:[^"]|"")*"'
    r"|`[^`]*`"
    r"|\[[^\]]*\]"
    r"|--[^\n]*"
    r"|/\*.*?\*/",
    re.DOTALL,
)
_NAMED_PLACEHOLDER_RE = re.compile(r"[:@$]([A-Za-z_][A-Za-z0-9_]*)")

_STATEMENT_ERROR_HINTS = ("syntax error", "no such", "incomplete input", "one statement")


def _placeholders(sql: str) -> tuple[set[str], bool]:
    """Return the named placeholders in ``sql`` and whether ``?`` is used."""
    code = _NON_CODE_RE.sub(" ", sql)
    return set(_NAMED_PLACEHOLDER_RE.findall(code)), "?" in code


def _translate(exc: sqlite3.Error | sqlite3.Warning, sql: str) -> DatabaseError:
    """Map a driver error raised while running ``sql`` onto our taxonomy."""
    message = str(exc)
    lowered = message.lower()

    # Older drivers report "one statement at a time" as a Warning.
    if isinstance(exc, sqlite3.Warning):
        return StatementError(f"Failed to prepare statement {sql!r}: {message}")

    if isinstance(exc, sqlite3.IntegrityError):
        return ExecutionError(f"Failed to execute statement {sql!r}: {message}")
    if isinstance(exc, sqlite3.InterfaceError):
        return BindError(f"Failed to bind parameters to statement {sql!r}: {message}")
    if isinstance(exc, sqlite3.ProgrammingError):
        if "binding" in lowered or "supplied" in lowered:
            return BindError(f"Failed to bind parameters to statement {sql!r}: {message}")
        if "closed" in lowered:
            return ExecutionError(f"Failed to execute statement {sql!r}: {message}")
        return StatementError(f"Failed to prepare statement {sql!r}: {message}")
    if isinstance(exc, sqlite3.OperationalError):
        error_name = getattr(exc, "sqlite_errorname", None)
        if error_name == "SQLITE_ERROR" or any(h in lowered for h in _STATEMENT_ERROR_HINTS):
            return StatementError(f"Failed to prepare statement {sql!r}: {message}")
    return ExecutionError(f"Failed to execute statement {sql!r}: {message}")


class Database:
    """A single open connection to a SQLite database file.

    Not safe for concurrent use: callers that need several threads give
    each one its own handle or serialize access themselves.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = str(path)
        try:
            self._conn = sqlite3.connect(self._path, isolation_level=None)
        except sqlite3.Error as exc:
            raise DatabaseConnectionError(
                f"Failed to open database {self._path}: {exc}"
            ) from exc
        self._conn.row_factory = sqlite3.Row

        # sqlite3.connect() is lazy; reading the catalogue makes a
        # corrupt or foreign file fail here instead of on first use.
        try:
            self._conn.execute("SELECT count(*) FROM sqlite_master").fetchone()
        except sqlite3.Error as exc:
            self._conn.close()
            raise DatabaseConnectionError(
                f"Failed to open database {self._path}: {exc}"
            ) from exc
        _logger.debug("Opened database %s", self._path)

    @classmethod
    def open(cls, path: str | Path) -> Database:
        """Open or create the database file at ``path``."""
        return cls(path)

    @property
    def path(self) -> str:
        return self._path

    @property
    def in_transaction(self) -> bool:
        return self._conn.in_transaction

    def close(self) -> None:
        """Release the connection. Uncommitted work is discarded."""
        self._conn.close()
        _logger.debug("Closed database %s", self._path)

    def __enter__(self) -> Database:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ── Statements ───────────────────────────────────────────────────────────

    def execute(
        self, sql: str, params: Mapping[str, Any] | None = None,
    ) -> sqlite3.Cursor | None:
        """Execute one SQL statement with named parameters.

        Args:
            sql: The statement. Values are referenced by named placeholders
                (``:name``, ``@name`` or ``$name``).
            params: Placeholder name to scalar value. Names may be given
                with or without their prefix character.

        Returns:
            The cursor positioned on the result set if the statement
            produces rows, None for statements that don't.

        Raises:
            StatementError: The SQL could not be prepared.
            BindError: A parameter could not be bound.
            ExecutionError: The statement failed while executing.
        """
        bound = self._bind(sql, params or {})

        cursor: sqlite3.Cursor | None = None
        try:
            cursor = self._conn.cursor()
            cursor.execute(sql, bound)
        except (sqlite3.Error, sqlite3.Warning) as exc:
            if cursor is not None:
                cursor.close()
            raise _translate(exc, sql) from exc
        except OverflowError as exc:
            if cursor is not None:
                cursor.close()
            raise BindError(f"Failed to bind parameters to statement {sql!r}: {exc}") from exc
        except UnicodeEncodeError as exc:
            if cursor is not None:
                cursor.close()
            raise StatementError(f"Failed to prepare statement {sql!r}: {exc}") from exc

        if cursor.description is None:
            cursor.close()
            return None
        return cursor

    def query_row(
        self, sql: str, params: Mapping[str, Any] | None = None,
    ) -> sqlite3.Row | None:
        """Return the first row of a query, or None if there are no rows."""
        try:
            cursor = self.execute(sql, params)
        except DatabaseError as exc:
            raise QueryError(f"Invalid query {sql!r}: {exc}") from exc
        if cursor is None:
            return None

        try:
            return cursor.fetchone()
        except sqlite3.Error as exc:
            raise QueryError(f"Invalid query {sql!r}: {exc}") from exc
        finally:
            cursor.close()

    def query_scalar(
        self, sql: str, params: Mapping[str, Any] | None = None,
    ) -> Any:
        """Return the first column of the first row, or None if there are no rows.

        Zero, empty strings and other falsy column values are returned as
        they are. Only an invalid query raises (QueryError).
        """
        row = self.query_row(sql, params)
        if row is None:
            return None
        return row[0]

    def last_inserted_id(self) -> int:
        """Row id generated by the most recent INSERT on this connection."""
        return int(self.query_scalar("SELECT last_insert_rowid()"))

    # ── Transactions ─────────────────────────────────────────────────────────

    def begin_transaction(self) -> None:
        self._transaction_control("BEGIN", "begin")

    def commit(self) -> None:
        self._transaction_control("COMMIT", "commit")

    def rollback(self) -> None:
        self._transaction_control("ROLLBACK", "rollback")

    @contextmanager
    def transaction(self) -> Iterator[Database]:
        """Run a block inside a transaction.

        Commits if the block finishes, rolls back and re-raises if the
        block or the commit raises. A failed rollback is logged; the
        original error wins.
        """
        self.begin_transaction()
        try:
            yield self
            self.commit()
        except BaseException:
            if not self.in_transaction:
                raise
            try:
                self.rollback()
            except TransactionError:
                _logger.error("Transaction rollback failed on %s", self._path, exc_info=True)
            raise

    def _transaction_control(self, statement: str, operation: str) -> None:
        try:
            self._conn.execute(statement)
        except sqlite3.Error as exc:
            raise TransactionError(operation, str(exc)) from exc

    # ── Internals ────────────────────────────────────────────────────────────

    @staticmethod
    def _bind(sql: str, params: Mapping[str, Any]) -> dict[str, Any]:
        """Check ``params`` against the placeholders of ``sql``.

        The driver silently ignores surplus names and coerces nothing, so
        every mismatch is reported here, before a cursor exists.
        """
        names, positional = _placeholders(sql)
        if positional:
            raise BindError(
                f"Positional placeholders are not supported in statement {sql!r}"
            )

        bound: dict[str, Any] = {}
        for key, value in params.items():
            name = str(key).lstrip(":@$")
            if name not in names:
                raise BindError(
                    f"Failed to bind parameter {key!r}: no such placeholder in statement {sql!r}"
                )
            if not isinstance(value, _SCALAR_TYPES):
                raise BindError(
                    f"Failed to bind parameter {key!r}: "
                    f"unsupported type {type(value).__name__}"
                )
            if isinstance(value, int) and not _INT_MIN <= value <= _INT_MAX:
                raise BindError(
                    f"Failed to bind parameter {key!r}: integer {value} does not fit in 64 bits"
                )
            if isinstance(value, str):
                try:
                    value.encode("utf-8")
                except UnicodeEncodeError as exc:
                    raise BindError(
                        f"Failed to bind parameter {key!r}: not valid UTF-8 text"
                    ) from exc
            bound[name] = value

        missing = names - bound.keys()
        if missing:
            raise BindError(
                f"No value supplied for placeholder(s) {', '.join(sorted(missing))} "
                f"in statement {sql!r}"
            )
        return bound

    def __repr__(self) -> str:
        return f"Database(path={self._path!r})"
