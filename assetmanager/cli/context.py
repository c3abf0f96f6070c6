"""CLI runtime context — the bootstrap that owns the database handle.

Every command opens its own handle, upgrades the schema before touching
any record, and closes the handle when it is done.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from rich.console import Console
from rich.logging import RichHandler

from assetmanager.config import settings
from assetmanager.db.database import Database
from assetmanager.exceptions import DatabaseError
from assetmanager.migrations.runner import Upgrader


def resolve_db_path(db_path: Path | None) -> Path:
    return db_path if db_path is not None else settings.db_path


@contextmanager
def open_database(db_path: Path | None = None, upgrader: Upgrader | None = None) -> Iterator[Database]:
    """Open the database, bring it to the latest version, close it afterwards."""
    path = resolve_db_path(db_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    db = Database.open(path)
    try:
        if not (upgrader or Upgrader()).upgrade(db):
            raise DatabaseError(f"Failed to upgrade database {path}; see the log for details")
        yield db
    finally:
        db.close()


def setup_logging(level: str | None = None) -> None:
    """Send log records to stderr through rich."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )
