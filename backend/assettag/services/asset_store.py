"""
Keyed access to asset records.

``save`` is the only write path. Inserts are guarded by the unique
``asset_number`` constraint and overwrites by the ``version`` column, so a
read-modify-write that lost a race surfaces as ``ConflictError`` instead of
silently clobbering the other writer.
"""

from typing import List, Optional

from sqlalchemy import inspect
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from assettag.core.errors import ConflictError
from assettag.models.asset import Asset


class AssetStore:
    def __init__(self, db: Session):
        self.db = db

    def find_by_key(self, asset_number: str, for_update: bool = False) -> Optional[Asset]:
        q = self.db.query(Asset).filter(Asset.asset_number == asset_number)
        if for_update:
            # row lock on backends that support it (no-op on SQLite)
            q = q.with_for_update()
        return q.first()

    def find_by_unit(self, unit: str) -> List[Asset]:
        return (
            self.db.query(Asset)
            .filter(Asset.unit == unit)
            .order_by(Asset.created_at.desc(), Asset.id.desc())
            .all()
        )

    def find_all(self) -> List[Asset]:
        return self.db.query(Asset).order_by(Asset.created_at.desc(), Asset.id.desc()).all()

    def save(self, asset: Asset) -> Asset:
        is_new = inspect(asset).transient

        if is_new and self.find_by_key(asset.asset_number) is not None:
            raise ConflictError(f"Asset {asset.asset_number} already exists")

        self.db.add(asset)
        try:
            self.db.flush()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError(f"Asset {asset.asset_number} already exists") from e
        except StaleDataError as e:
            self.db.rollback()
            raise ConflictError(f"Asset {asset.asset_number} was modified concurrently") from e

        return asset
