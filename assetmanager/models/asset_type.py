"""Asset types — stocks, bonds, real estate, currency and so on."""

from __future__ import annotations

from pydantic import BaseModel

from assetmanager.db.database import Database


class AssetType(BaseModel):
    """A kind of asset. ``id`` is 0 until the record has been created."""

    id: int = 0
    name: str

    def create(self, db: Database) -> None:
        db.execute("INSERT INTO asset_type (name) VALUES (:name)", {"name": self.name})
        self.id = db.last_inserted_id()

    @classmethod
    def read(cls, record_id: int, db: Database) -> AssetType | None:
        row = db.query_row(
            "SELECT id, name FROM asset_type WHERE id = :id", {"id": record_id},
        )
        if row is None:
            return None
        return cls(id=row["id"], name=row["name"])

    @classmethod
    def read_all(cls, db: Database) -> list[AssetType]:
        cursor = db.execute("SELECT id, name FROM asset_type ORDER BY rowid")
        try:
            return [cls(id=row["id"], name=row["name"]) for row in cursor]
        finally:
            cursor.close()

    def update(self, db: Database) -> None:
        db.execute(
            "UPDATE asset_type SET name = :name WHERE id = :id",
            {"id": self.id, "name": self.name},
        )

    def delete(self, db: Database) -> None:
        db.execute("DELETE FROM asset_type WHERE id = :id", {"id": self.id})

    def __str__(self) -> str:
        return f"AssetType(id={self.id}, name={self.name})"
