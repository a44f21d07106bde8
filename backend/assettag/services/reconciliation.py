"""
Merging incoming asset data into stored records.

Direct edits and bulk imports share one merge rule: fields present in the
payload overwrite the stored value, absent fields are left alone, and only
columns in ``MUTABLE_FIELDS`` are ever taken from a caller. The business key,
the photo slots, the derived ``is_complete`` flag and the bookkeeping
columns (``assigned_to``, timestamps, ``version``) are owned by the server.

Bulk import treats every record as its own unit of work: a bad record is
rolled back and reported, the remaining records are still processed.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import structlog
from sqlalchemy.orm import Session

from assettag.core.errors import AssetTagError, NotFoundError, ValidationError
from assettag.models.asset import Asset
from assettag.models.user import User
from assettag.services.asset_store import AssetStore
from assettag.services.audit import add_audit_log
from assettag.services.identity import ensure_unit_access, require_admin

log = structlog.get_logger(__name__)

MUTABLE_FIELDS = (
    "description",
    "asset_group",
    "safety_criticality",
    "operational_criticality",
    "iadc_code",
    "main_parent",
    "make",
    "model",
    "serial_number",
    "rfid_code",
    "rfid_tag_number",
    "remarks",
    "unit",
    "location",
    "status",
)

REQUIRED_ON_CREATE = ("asset_number", "description", "unit")

# NOT NULL columns a patch may not blank out
NON_EMPTY_FIELDS = ("description", "unit")

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def to_snake(key: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", key).lower()


def to_camel(key: str) -> str:
    head, *rest = key.split("_")
    return head + "".join(p.title() for p in rest)


def _clean(key: str, value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (int, float)):
        # spreadsheet exports turn serials and tag numbers into numbers
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        return str(value)
    raise ValidationError(f"{to_camel(key)} must be a scalar value")


def normalize_fields(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """Map camelCase or snake_case keys onto column names."""
    out: Dict[str, Any] = {}
    for key, value in payload.items():
        name = to_snake(str(key))
        if name in MUTABLE_FIELDS or name == "asset_number":
            out[name] = _clean(name, value)
        else:
            out[name] = value
    return out


def split_patch(fields: Mapping[str, Any]) -> Tuple[Dict[str, Any], List[str]]:
    accepted = {k: fields[k] for k in MUTABLE_FIELDS if k in fields}
    ignored = sorted(k for k in fields if k not in MUTABLE_FIELDS and k != "asset_number")
    return accepted, ignored


def _record_key(record: Any) -> Optional[str]:
    """Business key of a raw import record, as reported back on failure."""
    if not isinstance(record, Mapping):
        return None
    raw = record.get("assetNumber", record.get("asset_number"))
    try:
        return _clean("asset_number", raw) or None
    except ValidationError:
        return None


@dataclass
class ImportResult:
    new_count: int = 0
    update_count: int = 0
    failed_count: int = 0
    total_processed: int = 0
    errors: List[dict] = field(default_factory=list)


class ReconciliationEngine:
    def __init__(self, db: Session):
        self.db = db
        self.store = AssetStore(db)

    # ---------- DIRECT ----------

    def create(self, payload: Mapping[str, Any], actor: User, *, ip: Optional[str] = None) -> Asset:
        asset = self._build(normalize_fields(payload), actor)
        self.store.save(asset)
        self._audit("asset_create", asset, self._populated(asset), actor, ip)
        self.db.commit()

        log.info("asset_created", asset_number=asset.asset_number, unit=asset.unit, actor=actor.username)
        return asset

    def update(
        self,
        asset_number: str,
        patch: Mapping[str, Any],
        actor: User,
        *,
        ip: Optional[str] = None,
    ) -> Asset:
        asset = self.store.find_by_key(asset_number, for_update=True)
        if asset is None:
            raise NotFoundError("Asset not found")
        ensure_unit_access(actor, asset.unit)

        changed = self._merge(asset, normalize_fields(patch), actor)
        self.store.save(asset)
        self._audit("asset_update", asset, changed, actor, ip)
        self.db.commit()

        log.info("asset_updated", asset_number=asset.asset_number, fields=changed, actor=actor.username)
        return asset

    # ---------- BULK ----------

    def import_assets(
        self,
        records: Sequence[Any],
        actor: User,
        *,
        ip: Optional[str] = None,
    ) -> ImportResult:
        require_admin(actor)

        result = ImportResult(total_processed=len(records))

        for index, record in enumerate(records):
            try:
                created = self._import_one(record, actor, ip)
            except AssetTagError as e:
                self.db.rollback()
                asset_number = _record_key(record)
                result.failed_count += 1
                result.errors.append({"index": index, "assetNumber": asset_number, "error": e.detail})
                log.warning("import_record_failed", index=index, asset_number=asset_number, error=e.detail)
                continue

            if created:
                result.new_count += 1
            else:
                result.update_count += 1

        log.info(
            "assets_imported",
            new=result.new_count,
            updated=result.update_count,
            failed=result.failed_count,
            total=result.total_processed,
            actor=actor.username,
        )
        return result

    def _import_one(self, record: Any, actor: User, ip: Optional[str]) -> bool:
        if not isinstance(record, Mapping):
            raise ValidationError("Import record must be an object")

        fields = normalize_fields(record)
        asset_number = fields.get("asset_number")
        if not asset_number:
            raise ValidationError("Missing required field(s): assetNumber")

        existing = self.store.find_by_key(asset_number, for_update=True)
        if existing is not None:
            changed = self._merge(existing, fields, actor)
            self.store.save(existing)
            self._audit("asset_import_update", existing, changed, actor, ip)
            self.db.commit()
            return False

        asset = self._build(fields, actor)
        self.store.save(asset)
        self._audit("asset_import_create", asset, self._populated(asset), actor, ip)
        self.db.commit()
        return True

    # ---------- MERGE RULES ----------

    def _build(self, fields: Dict[str, Any], actor: User) -> Asset:
        missing = [to_camel(k) for k in REQUIRED_ON_CREATE if not fields.get(k)]
        if missing:
            raise ValidationError(f"Missing required field(s): {', '.join(missing)}")
        ensure_unit_access(actor, fields["unit"])

        accepted, ignored = split_patch(fields)
        if ignored:
            log.info("protected_fields_ignored", asset_number=fields["asset_number"], fields=ignored)

        # leave NULLs out so column defaults apply
        values = {k: v for k, v in accepted.items() if v is not None}

        now = datetime.utcnow()
        return Asset(
            asset_number=fields["asset_number"],
            is_complete=False,
            assigned_to=actor.username,
            last_updated=now,
            created_at=now,
            **values,
        )

    def _merge(self, asset: Asset, fields: Dict[str, Any], actor: User) -> List[str]:
        accepted, ignored = split_patch(fields)
        if ignored:
            log.info("protected_fields_ignored", asset_number=asset.asset_number, fields=ignored)

        blank = [to_camel(k) for k in NON_EMPTY_FIELDS if k in accepted and not accepted[k]]
        if blank:
            raise ValidationError(f"Field(s) cannot be empty: {', '.join(blank)}")

        if "unit" in accepted and accepted["unit"] != asset.unit:
            ensure_unit_access(actor, accepted["unit"])

        changed = [k for k, v in accepted.items() if getattr(asset, k) != v]
        for k, v in accepted.items():
            setattr(asset, k, v)

        asset.assigned_to = actor.username
        asset.last_updated = datetime.utcnow()
        return changed

    @staticmethod
    def _populated(asset: Asset) -> List[str]:
        return [k for k in MUTABLE_FIELDS if getattr(asset, k) is not None]

    def _audit(self, action: str, asset: Asset, fields: List[str], actor: User, ip: Optional[str]) -> None:
        add_audit_log(self.db, action=action, asset=asset, fields=fields, actor=actor.username, ip=ip)
