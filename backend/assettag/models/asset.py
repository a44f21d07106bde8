from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    Boolean,
    Index,
)
from datetime import datetime
from assettag.core.database import Base


class Asset(Base):
    __tablename__ = "assets"

    __table_args__ = (
        Index("ix_assets_unit", "unit"),
        Index("ix_assets_unit_complete", "unit", "is_complete"),
    )

    id = Column(Integer, primary_key=True, index=True)

    # business key, never changes after creation
    asset_number = Column(String, unique=True, index=True, nullable=False)

    description = Column(String, nullable=False)
    asset_group = Column(String, nullable=True)
    safety_criticality = Column(String, default="Non Critical")
    operational_criticality = Column(String, default="Non Critical")
    iadc_code = Column(String, nullable=True)
    main_parent = Column(String, nullable=True)
    make = Column(String, nullable=True)
    model = Column(String, nullable=True)
    serial_number = Column(String, nullable=True)
    rfid_code = Column(String, nullable=True)
    rfid_tag_number = Column(String, nullable=True)
    remarks = Column(String, nullable=True)

    unit = Column(String, nullable=False)
    location = Column(String, nullable=True)
    status = Column(String, default="Active")

    # photo slots A-D hold a storage reference (URL) or NULL
    photo_a = Column(String, nullable=True)
    photo_b = Column(String, nullable=True)
    photo_c = Column(String, nullable=True)
    photo_d = Column(String, nullable=True)

    # derived from the photo slots, see services.photos
    is_complete = Column(Boolean, nullable=False, default=False)

    assigned_to = Column(String, nullable=True)

    # timestamps
    last_updated = Column(DateTime, default=datetime.utcnow)
    created_at = Column(DateTime, default=datetime.utcnow)

    # optimistic lock: UPDATE ... WHERE version = :old
    version = Column(Integer, nullable=False, default=1)

    __mapper_args__ = {"version_id_col": version}

    @property
    def photos(self) -> dict:
        return {
            "A": self.photo_a,
            "B": self.photo_b,
            "C": self.photo_c,
            "D": self.photo_d,
        }
