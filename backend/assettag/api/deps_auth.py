# backend/assettag/api/deps_auth.py

from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from assettag.core.errors import ForbiddenError
from assettag.core.security import decode_token
from assettag.models.user import User as UserModel
from assettag.storage import PhotoStorage

# Only used by Swagger UI for the "Authorize" flow.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/token")


def get_db(request: Request):
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_photo_storage(request: Request) -> PhotoStorage:
    return request.app.state.photo_storage


def get_ip(request: Request) -> Optional[str]:
    return request.client.host if request.client else None


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> UserModel:
    cred_exc = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = decode_token(token)
    except ValueError:
        raise cred_exc

    # sub is the user id
    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise cred_exc

    user = db.get(UserModel, user_id)
    if not user or not user.is_active:
        raise cred_exc

    return user


def require_admin(user: UserModel = Depends(get_current_user)) -> UserModel:
    if not user.is_admin:
        raise ForbiddenError("Admin access required")
    return user
