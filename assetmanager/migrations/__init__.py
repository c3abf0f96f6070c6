"""Database upgrade system for assetmanager.

Tracks schema versions in the db_version table and upgrades a database
one version at a time. Each upgrade step is a Python module with an
`upgrade()` function.
"""

from assetmanager.migrations.runner import UpgradeStep, Upgrader, discover_steps, upgrade

__all__ = ["UpgradeStep", "Upgrader", "discover_steps", "upgrade"]
