"""Schema version store — the db_version history table.

The table is append-only: every successful upgrade step (or explicit
set_version call) adds a row. The current version is derived from the
history rather than stored: the row with the latest date wins, and rows
sharing that date are ranked by version.

Dates are stored as ISO 8601 text (YYYY-MM-DD) so that text ordering is
chronological ordering.
"""

from __future__ import annotations

import datetime
import re

from pydantic import BaseModel, Field

from assetmanager.db.database import Database
from assetmanager.exceptions import InvalidArgumentError, QueryError

VERSION_TABLE = "db_version"

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class VersionRecord(BaseModel):
    """One row of the version history."""

    version: int = Field(ge=1)
    date: datetime.date


def has_version_table(db: Database) -> bool:
    name = db.query_scalar(
        "SELECT name FROM sqlite_master WHERE type = 'table' AND name = :name",
        {"name": VERSION_TABLE},
    )
    return name is not None


def current_version(db: Database) -> int:
    """Return the schema version of ``db``; 0 for a pristine database."""
    if not has_version_table(db):
        return 0

    version = db.query_scalar(
        "SELECT version FROM db_version ORDER BY date DESC, version DESC LIMIT 1"
    )
    if version is None:
        return 0
    try:
        return int(version)
    except (TypeError, ValueError) as exc:
        raise QueryError(f"Stored schema version {version!r} is not an integer") from exc


def set_version(
    db: Database,
    version: int,
    date: datetime.date | str | None = None,
) -> None:
    """Append a version record.

    Args:
        db: The database to record the version in.
        version: Version number, at least 1.
        date: Date of the record, as a date or a YYYY-MM-DD string.
            Defaults to today.

    Raises:
        InvalidArgumentError: ``version`` or ``date`` is invalid. Nothing
            is written in that case.
    """
    if isinstance(version, bool) or not isinstance(version, int) or version < 1:
        raise InvalidArgumentError(f"Version must be an integer not lower than 1, got {version!r}")
    day = _to_date(date)

    db.execute(
        "INSERT INTO db_version (version, date) VALUES (:version, :date)",
        {"version": version, "date": day.isoformat()},
    )


def version_history(db: Database) -> list[VersionRecord]:
    """All version records, oldest first."""
    if not has_version_table(db):
        return []

    cursor = db.execute("SELECT version, date FROM db_version ORDER BY date, version")
    try:
        return [_to_record(row["version"], row["date"]) for row in cursor]
    finally:
        cursor.close()


def _to_record(version: object, date: object) -> VersionRecord:
    try:
        return VersionRecord(version=version, date=datetime.date.fromisoformat(date))
    except (TypeError, ValueError) as exc:
        raise QueryError(f"Malformed version record ({version!r}, {date!r})") from exc


def _to_date(value: datetime.date | str | None) -> datetime.date:
    if value is None:
        return datetime.date.today()
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    if isinstance(value, str) and _ISO_DATE_RE.match(value):
        try:
            return datetime.date.fromisoformat(value)
        except ValueError as exc:
            raise InvalidArgumentError(f"Not a valid calendar date: {value!r}") from exc
    raise InvalidArgumentError(f"Date must have the format YYYY-MM-DD, got {value!r}")
