import math

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from assettag.models.asset import Asset
from assettag.services.identity import IdentityStore


def percentage(done: int, total: int) -> int:
    if total <= 0:
        return 0
    # half-up, so 12.5 reads as 13
    return int(math.floor(done / total * 100 + 0.5))


def compute_stats(db: Session) -> dict:
    completed_expr = func.sum(case((Asset.is_complete == True, 1), else_=0))  # noqa: E712

    rows = (
        db.query(Asset.unit, func.count(Asset.id), completed_expr)
        .group_by(Asset.unit)
        .order_by(Asset.unit)
        .all()
    )

    unit_stats = []
    total_assets = 0
    completed_assets = 0

    for unit, total, completed in rows:
        total = int(total or 0)
        completed = int(completed or 0)
        total_assets += total
        completed_assets += completed
        unit_stats.append(
            {
                "unit": unit,
                "total": total,
                "completed": completed,
                "percentage": percentage(completed, total),
            }
        )

    return {
        "total_assets": total_assets,
        "completed_assets": completed_assets,
        "total_users": IdentityStore(db).count_non_admin(),
        "completion_percentage": percentage(completed_assets, total_assets),
        "unit_stats": unit_stats,
    }
