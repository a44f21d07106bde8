import structlog
from sqlalchemy.orm import Session

from assettag.core.security import hash_password
from assettag.models.user import User

log = structlog.get_logger(__name__)


def seed_default_admin(db: Session, password: str) -> bool:
    if db.query(User).filter(User.username == "admin").first():
        return False

    admin = User(
        username="admin",
        name="System Administrator",
        unit="ALL",
        role="admin",
        password_hash=hash_password(password),
        first_login=True,
        is_active=True,
    )

    db.add(admin)
    db.commit()

    log.info("default_admin_created", username=admin.username)
    return True
