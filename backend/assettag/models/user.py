from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Integer, String
from assettag.core.database import Base

ROLES = ("admin", "technician", "mechanic", "supervisor")


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)

    username = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    name = Column(String, nullable=False)

    # organizational unit; "ALL" for the seeded admin
    unit = Column(String, nullable=False, index=True)

    # "admin" | "technician" | "mechanic" | "supervisor"
    role = Column(String, nullable=False, default="technician")

    first_login = Column(Boolean, nullable=False, default=True)
    is_active = Column(Boolean, nullable=False, default=True)

    last_login = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
