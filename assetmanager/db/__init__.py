"""Data-access layer: the connection handle and the schema version store."""

from assetmanager.db.database import Database
from assetmanager.db.version import (
    VersionRecord,
    current_version,
    set_version,
    version_history,
)

__all__ = [
    "Database",
    "VersionRecord",
    "current_version",
    "set_version",
    "version_history",
]
