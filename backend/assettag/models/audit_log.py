from sqlalchemy import Column, DateTime, Integer, String, func
from assettag.core.database import Base


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True)

    # what happened
    action = Column(String, nullable=False)  # e.g. "asset_update", "photo_upload"

    # what item
    asset_number = Column(String, nullable=False, index=True)
    unit = Column(String, nullable=False, index=True)

    # comma-separated column names touched by the change
    fields = Column(String, nullable=False, default="")

    # who/where
    actor = Column(String, nullable=False, default="system")
    ip = Column(String, nullable=True)

    created_at = Column(DateTime, server_default=func.now(), nullable=False)
