"""Upgrade runner — brings a database up to the latest schema version.

Upgrade steps are Python modules in the `assetmanager/migrations/`
directory, named `m_NNN_description.py` where NNN is the zero-padded
version the step produces. Each must define `def upgrade(db: Database)`.
Adding a schema version means adding a module; the runner itself does
not change.

Each step runs in its own transaction together with the version record
it produces, so a database is always left at a whole version.
"""

from __future__ import annotations

import importlib
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Sequence

from assetmanager.db.database import Database
from assetmanager.db.version import current_version, set_version
from assetmanager.exceptions import DatabaseError, InvalidArgumentError

_logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).parent
MIGRATION_PREFIX = "m_"


@dataclass(frozen=True)
class UpgradeStep:
    """One schema transformation, producing ``version``."""

    version: int
    name: str
    apply: Callable[[Database], None]


def discover_steps() -> list[UpgradeStep]:
    """Load every upgrade step module, ordered by version."""
    steps: list[UpgradeStep] = []

    for mf in sorted(MIGRATIONS_DIR.glob(f"{MIGRATION_PREFIX}*.py")):
        # Extract version number: m_001_initial.py -> 1
        parts = mf.stem.split("_")
        if len(parts) < 2:
            continue
        try:
            version = int(parts[1])
        except ValueError:
            continue

        module = importlib.import_module(f"assetmanager.migrations.{mf.stem}")
        name = "_".join(parts[2:]) or mf.stem
        steps.append(UpgradeStep(version=version, name=name, apply=module.upgrade))

    steps.sort(key=lambda s: s.version)
    return steps


class Upgrader:
    """Applies pending upgrade steps to a database, one transaction each."""

    def __init__(self, steps: Sequence[UpgradeStep] | None = None) -> None:
        if steps is None:
            steps = discover_steps()
        self._steps = sorted(steps, key=lambda s: s.version)

        expected = list(range(1, len(self._steps) + 1))
        actual = [s.version for s in self._steps]
        if actual != expected:
            raise InvalidArgumentError(
                f"Upgrade steps must be numbered 1..{len(expected)} without gaps, got {actual}"
            )

        self.applied: list[int] = []

    @property
    def latest_version(self) -> int:
        return self._steps[-1].version if self._steps else 0

    def pending(self, db: Database) -> list[UpgradeStep]:
        """Steps not yet applied to ``db``, in the order they will run."""
        current = current_version(db)
        if current > self.latest_version:
            _logger.warning(
                "Database %s is at version %d, newer than the latest known version %d",
                db.path, current, self.latest_version,
            )
        return [s for s in self._steps if s.version > current]

    def upgrade(self, db: Database) -> bool:
        """Upgrade ``db`` to the latest version.

        Returns True if every pending step was applied (or none was
        pending). Returns False as soon as a step fails; that step is
        rolled back, later steps are not attempted, and the database
        should be treated as unusable for this session. Never raises for
        a database failure.
        """
        self.applied = []

        try:
            steps = self.pending(db)
        except Exception:
            _logger.exception("Failed to read the schema version of %s", db.path)
            return False

        for step in steps:
            if not self._apply(db, step):
                return False
            self.applied.append(step.version)

        return True

    def _apply(self, db: Database, step: UpgradeStep) -> bool:
        try:
            db.begin_transaction()
        except DatabaseError:
            _logger.exception("Failed to start upgrade to version %d on %s", step.version, db.path)
            return False

        try:
            step.apply(db)
            set_version(db, step.version)
            db.commit()
        except Exception:
            _logger.exception(
                "Upgrade to version %d (%s) failed on %s", step.version, step.name, db.path,
            )
            try:
                db.rollback()
            except DatabaseError:
                _logger.error("Transaction rollback failed on %s", db.path, exc_info=True)
            return False

        _logger.info("Upgraded %s to version %d (%s)", db.path, step.version, step.name)
        return True


def upgrade(db: Database) -> bool:
    """Upgrade ``db`` using the upgrade steps shipped with assetmanager."""
    return Upgrader().upgrade(db)
