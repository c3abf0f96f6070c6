"""Migration 001: version history and asset types.

Every statement is guarded with IF NOT EXISTS, so re-running the step
after a rolled-back attempt is safe.
"""

from __future__ import annotations

from assetmanager.db.database import Database


def upgrade(db: Database) -> None:
    db.execute("""
        CREATE TABLE IF NOT EXISTS db_version (
            version INTEGER NOT NULL,
            date    TEXT    NOT NULL
        )
    """)
    # The current version is looked up by date on every start.
    db.execute("CREATE INDEX IF NOT EXISTS idx_date ON db_version(date)")

    db.execute("""
        CREATE TABLE IF NOT EXISTS asset_type (
            id   INTEGER PRIMARY KEY,
            name TEXT
        )
    """)
