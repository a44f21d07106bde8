from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from assettag.models.asset import Asset
from assettag.models.audit_log import AuditLog


def add_audit_log(
    db: Session,
    *,
    action: str,
    asset: Asset,
    fields: Iterable[str],
    actor: str,
    ip: Optional[str] = None,
) -> AuditLog:
    log = AuditLog(
        action=action,
        asset_number=asset.asset_number,
        unit=asset.unit,
        fields=",".join(sorted(fields)),
        actor=actor,
        ip=ip,
    )
    db.add(log)
    return log


def list_audit_logs(
    db: Session,
    *,
    unit: Optional[str] = None,
    asset_number: Optional[str] = None,
    limit: int = 50,
) -> List[AuditLog]:
    limit = max(1, min(limit, 200))

    q = db.query(AuditLog).order_by(AuditLog.id.desc())

    if unit is not None:
        q = q.filter(AuditLog.unit == unit)
    if asset_number is not None:
        q = q.filter(AuditLog.asset_number == asset_number)

    return q.limit(limit).all()
