# backend/assettag/api/routes.py

import csv
import io
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, File, Request, UploadFile
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from sqlalchemy.orm import Session

from assettag.api.deps_auth import get_current_user, get_db, get_ip, get_photo_storage
from assettag.api.schemas import CamelModel
from assettag.core.errors import NotFoundError
from assettag.models.asset import Asset as AssetModel
from assettag.models.user import User
from assettag.services.asset_store import AssetStore
from assettag.services.audit import list_audit_logs
from assettag.services.identity import ensure_unit_access, visible_unit
from assettag.services.photos import PhotoTracker
from assettag.services.reconciliation import ReconciliationEngine
from assettag.services.stats import compute_stats
from assettag.storage import PhotoStorage

router = APIRouter()

# ---------- SCHEMAS ----------


class Photos(BaseModel):
    A: Optional[str] = None
    B: Optional[str] = None
    C: Optional[str] = None
    D: Optional[str] = None


class Asset(CamelModel):
    asset_number: str
    description: str
    asset_group: Optional[str] = None
    safety_criticality: Optional[str] = None
    operational_criticality: Optional[str] = None
    iadc_code: Optional[str] = None
    main_parent: Optional[str] = None
    make: Optional[str] = None
    model: Optional[str] = None
    serial_number: Optional[str] = None
    rfid_code: Optional[str] = None
    rfid_tag_number: Optional[str] = None
    remarks: Optional[str] = None
    unit: str
    location: Optional[str] = None
    status: Optional[str] = None

    photos: Photos
    is_complete: bool
    assigned_to: Optional[str] = None

    last_updated: Optional[datetime] = None
    created_at: Optional[datetime] = None


class ImportIn(BaseModel):
    # raw objects: a malformed record fails on its own, not the whole batch
    assets: List[Any]


class ImportFailure(CamelModel):
    index: int
    asset_number: Optional[str] = None
    error: str


class ImportOut(CamelModel):
    new_count: int
    update_count: int
    failed_count: int
    total_processed: int
    errors: List[ImportFailure] = Field(default_factory=list)


class PhotoOut(CamelModel):
    message: str = "Photo uploaded successfully"
    photo_url: str
    is_complete: bool


class UnitStats(BaseModel):
    unit: str
    total: int
    completed: int
    percentage: int


class StatsOut(CamelModel):
    total_assets: int
    completed_assets: int
    total_users: int
    completion_percentage: int
    unit_stats: List[UnitStats]


class AuditLogOut(CamelModel):
    id: int
    action: str
    asset_number: str
    unit: str
    fields: str
    actor: str
    ip: Optional[str] = None
    created_at: Optional[datetime] = None


CSV_COLUMNS = [
    "asset_number",
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
    "is_complete",
    "assigned_to",
]

# ---------- HELPERS ----------


def _visible_assets(db: Session, user: User) -> List[AssetModel]:
    store = AssetStore(db)
    unit = visible_unit(user)
    return store.find_all() if unit is None else store.find_by_unit(unit)

# ---------- ROUTES ----------


@router.get("/health")
def health():
    return {
        "status": "OK",
        "message": "MB Asset Tagging API",
        "timestamp": datetime.utcnow().isoformat() + "Z",
    }

# ---------- ASSETS (unit-scoped for non-admins) ----------


@router.get("/assets", response_model=List[Asset])
def list_assets(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return _visible_assets(db, user)


@router.get("/assets.csv")
def list_assets_csv(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    buf = io.StringIO()
    w = csv.writer(buf)
    w.writerow([to_camel(c) for c in CSV_COLUMNS] + ["photoA", "photoB", "photoC", "photoD"])

    for a in _visible_assets(db, user):
        row = [getattr(a, c) for c in CSV_COLUMNS]
        w.writerow(["" if v is None else v for v in row] + [a.photos[s] or "" for s in "ABCD"])

    return StreamingResponse(
        io.BytesIO(buf.getvalue().encode("utf-8")),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="assets.csv"'},
    )


@router.post("/assets/import", response_model=ImportOut)
def import_assets(
    payload: ImportIn,
    request: Request,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    result = ReconciliationEngine(db).import_assets(payload.assets, user, ip=get_ip(request))
    return ImportOut.model_validate(result)


@router.get("/assets/{asset_number}", response_model=Asset)
def get_asset(
    asset_number: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    asset = AssetStore(db).find_by_key(asset_number)
    if asset is None:
        raise NotFoundError("Asset not found")
    ensure_unit_access(user, asset.unit)
    return asset


@router.post("/assets", response_model=Asset, status_code=201)
def create_asset(
    payload: Dict[str, Any],
    request: Request,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return ReconciliationEngine(db).create(payload, user, ip=get_ip(request))


@router.put("/assets/{asset_number}", response_model=Asset)
def update_asset(
    asset_number: str,
    payload: Dict[str, Any],
    request: Request,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return ReconciliationEngine(db).update(asset_number, payload, user, ip=get_ip(request))


@router.post("/assets/{asset_number}/photos/{slot}", response_model=PhotoOut)
def upload_photo(
    asset_number: str,
    slot: str,
    request: Request,
    file: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    storage: PhotoStorage = Depends(get_photo_storage),
):
    content = file.file.read() if file is not None else None
    content_type = file.content_type if file is not None else None

    result = PhotoTracker(db).upload(
        asset_number,
        slot,
        storage,
        user,
        content=content,
        content_type=content_type,
        ip=get_ip(request),
    )
    return PhotoOut(photo_url=result.photo_url, is_complete=result.is_complete)

# ---------- STATS ----------


@router.get("/stats", response_model=StatsOut)
def stats(
    db: Session = Depends(get_db),
    _user: User = Depends(get_current_user),
):
    return StatsOut.model_validate(compute_stats(db))

# ---------- AUDIT LOG READ ----------


@router.get("/audit-logs", response_model=List[AuditLogOut])
def audit_logs(
    asset_number: Optional[str] = None,
    limit: int = 50,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return list_audit_logs(db, unit=visible_unit(user), asset_number=asset_number, limit=limit)
