from datetime import datetime
from typing import List, Optional

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from assettag.core.errors import AuthError, ConflictError, ForbiddenError, ValidationError
from assettag.core.security import hash_password, verify_password
from assettag.models.user import ROLES, User

log = structlog.get_logger(__name__)


# ---------- AUTHORIZATION ----------

def require_admin(user: User) -> None:
    if not user.is_admin:
        raise ForbiddenError("Admin access required")


def visible_unit(user: User) -> Optional[str]:
    """None means every unit is visible."""
    return None if user.is_admin else user.unit


def ensure_unit_access(user: User, unit: Optional[str]) -> None:
    if not user.is_admin and unit != user.unit:
        raise ForbiddenError("Asset belongs to another unit")


# ---------- USERS ----------

class IdentityStore:
    def __init__(self, db: Session):
        self.db = db

    def find_by_username(self, username: str) -> Optional[User]:
        return self.db.query(User).filter(User.username == username).first()

    def find_by_id(self, user_id: int) -> Optional[User]:
        return self.db.get(User, user_id)

    def list_users(self) -> List[User]:
        return self.db.query(User).order_by(User.username).all()

    def count_non_admin(self) -> int:
        return self.db.query(User).filter(User.role != "admin").count()

    def create_user(
        self,
        *,
        username: str,
        password: str,
        name: str,
        unit: str,
        role: str = "technician",
    ) -> User:
        username = (username or "").strip()
        if not username or not password or not (name or "").strip() or not (unit or "").strip():
            raise ValidationError("username, password, name and unit are required")
        if role not in ROLES:
            raise ValidationError(f"role must be one of {', '.join(ROLES)}")
        if self.find_by_username(username):
            raise ConflictError(f"User {username} already exists")

        user = User(
            username=username,
            password_hash=hash_password(password),
            name=name.strip(),
            unit=unit.strip(),
            role=role,
            first_login=True,
            is_active=True,
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError(f"User {username} already exists") from e

        log.info("user_created", username=username, unit=user.unit, role=role)
        return user

    def authenticate(self, username: str, password: str) -> User:
        user = self.find_by_username((username or "").strip())

        if not user or not user.is_active or not verify_password(password, user.password_hash):
            log.warning("login_failed", username=username)
            raise AuthError("Invalid credentials")

        user.last_login = datetime.utcnow()
        self.db.commit()
        return user

    def change_password(self, user: User, new_password: str) -> User:
        if not new_password:
            raise ValidationError("newPassword is required")

        user.password_hash = hash_password(new_password)
        user.first_login = False
        self.db.commit()

        log.info("password_changed", username=user.username)
        return user
