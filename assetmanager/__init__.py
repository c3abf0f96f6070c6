"""assetmanager — personal finance tracking on top of SQLite."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("assetmanager")
except PackageNotFoundError:
    __version__ = "0.1.0"  # fallback for development
