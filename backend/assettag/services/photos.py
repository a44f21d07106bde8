from dataclasses import dataclass
from datetime import datetime
from typing import Mapping, Optional, Tuple

import structlog
from sqlalchemy.orm import Session

from assettag.core.errors import InvalidSlotError, NotFoundError, ValidationError
from assettag.models.asset import Asset
from assettag.models.user import User
from assettag.services.asset_store import AssetStore
from assettag.services.audit import add_audit_log
from assettag.services.identity import ensure_unit_access
from assettag.storage.provider import PhotoStorage

log = structlog.get_logger(__name__)

PHOTO_SLOTS = ("A", "B", "C", "D")

SLOT_COLUMNS = {slot: f"photo_{slot.lower()}" for slot in PHOTO_SLOTS}


def normalize_slot(slot: str) -> str:
    s = (slot or "").strip().upper()
    if s not in PHOTO_SLOTS:
        raise InvalidSlotError(f"Invalid photo slot {slot!r}, expected one of {', '.join(PHOTO_SLOTS)}")
    return s


def compute_is_complete(photos: Mapping[str, Optional[str]]) -> bool:
    return all(photos.get(slot) for slot in PHOTO_SLOTS)


@dataclass
class PhotoResult:
    asset: Asset
    photo_url: str
    is_complete: bool


class PhotoTracker:
    def __init__(self, db: Session):
        self.db = db
        self.store = AssetStore(db)

    def set_photo(
        self,
        asset_number: str,
        slot: str,
        reference: str,
        actor: User,
        *,
        ip: Optional[str] = None,
    ) -> PhotoResult:
        asset, slot = self._locate(asset_number, slot, actor)
        return self._record(asset, slot, reference, actor, ip)

    def upload(
        self,
        asset_number: str,
        slot: str,
        storage: PhotoStorage,
        actor: User,
        *,
        content: Optional[bytes] = None,
        content_type: Optional[str] = None,
        ip: Optional[str] = None,
    ) -> PhotoResult:
        # validate before anything is written to storage
        asset, slot = self._locate(asset_number, slot, actor)
        reference = storage.store(asset.asset_number, slot, content, content_type)
        return self._record(asset, slot, reference, actor, ip)

    def _locate(self, asset_number: str, slot: str, actor: User) -> Tuple[Asset, str]:
        slot = normalize_slot(slot)

        asset = self.store.find_by_key(asset_number, for_update=True)
        if asset is None:
            raise NotFoundError("Asset not found")
        ensure_unit_access(actor, asset.unit)

        return asset, slot

    def _record(self, asset: Asset, slot: str, reference: str, actor: User, ip: Optional[str]) -> PhotoResult:
        if not reference:
            raise ValidationError("Photo reference is empty")

        setattr(asset, SLOT_COLUMNS[slot], reference)
        asset.is_complete = compute_is_complete(asset.photos)
        asset.assigned_to = actor.username
        asset.last_updated = datetime.utcnow()

        self.store.save(asset)
        add_audit_log(
            self.db,
            action="photo_upload",
            asset=asset,
            fields=[SLOT_COLUMNS[slot], "is_complete"],
            actor=actor.username,
            ip=ip,
        )
        self.db.commit()

        log.info(
            "photo_recorded",
            asset_number=asset.asset_number,
            slot=slot,
            is_complete=asset.is_complete,
            actor=actor.username,
        )
        return PhotoResult(asset=asset, photo_url=reference, is_complete=asset.is_complete)
