"""Record gateways — the CRUD contract shared by stored record types.

A record type is a gateway if it offers these five operations; it does
not need to inherit from anything. Every operation takes the Database
explicitly and lets its errors propagate unchanged.
"""

from __future__ import annotations

from typing import Protocol, Sequence, TypeVar, runtime_checkable

from assetmanager.db.database import Database

R = TypeVar("R", bound="RecordGateway")


@runtime_checkable
class RecordGateway(Protocol):
    """Create, read, update and delete one kind of record."""

    def create(self, db: Database) -> None:
        """Insert this record and store the generated id on it."""
        ...

    @classmethod
    def read(cls: type[R], record_id: int, db: Database) -> R | None:
        """Load the record with ``record_id``, or None if there is none."""
        ...

    @classmethod
    def read_all(cls: type[R], db: Database) -> Sequence[R]:
        """Load every record of this kind, in storage order."""
        ...

    def update(self, db: Database) -> None:
        """Write this record's fields over the stored row."""
        ...

    def delete(self, db: Database) -> None:
        """Remove the stored row for this record."""
        ...
