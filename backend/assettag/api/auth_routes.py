# backend/assettag/api/auth_routes.py

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm
from pydantic import BaseModel
from sqlalchemy.orm import Session

from assettag.api.deps_auth import get_current_user, get_db, require_admin
from assettag.api.schemas import CamelModel
from assettag.core.security import create_access_token
from assettag.models.user import User
from assettag.services.identity import IdentityStore

router = APIRouter()


class LoginIn(BaseModel):
    username: str
    password: str


class UserOut(CamelModel):
    id: int
    username: str
    name: str
    unit: str
    role: str
    first_login: bool
    is_active: bool
    last_login: Optional[datetime] = None


class LoginOut(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserOut


class ChangePasswordIn(CamelModel):
    new_password: str


class UserCreate(CamelModel):
    username: str
    password: str
    name: str
    unit: str
    role: str = "technician"


def _login(db: Session, username: str, password: str) -> LoginOut:
    user = IdentityStore(db).authenticate(username, password)

    token = create_access_token({"sub": str(user.id), "username": user.username, "role": user.role})

    return LoginOut(
        access_token=token,
        user=UserOut.model_validate(user),
    )


# JSON login (mobile + web client)
@router.post("/login", response_model=LoginOut)
def login(payload: LoginIn, db: Session = Depends(get_db)):
    return _login(db, payload.username, payload.password)


# OAuth2 form endpoint (Swagger Authorize uses this)
@router.post("/token", response_model=LoginOut)
def token(form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
    return _login(db, form_data.username or "", form_data.password or "")


@router.get("/me", response_model=UserOut)
def me(current_user: User = Depends(get_current_user)):
    return UserOut.model_validate(current_user)


@router.post("/change-password")
def change_password(
    payload: ChangePasswordIn,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    IdentityStore(db).change_password(current_user, payload.new_password)
    return {"message": "Password updated successfully"}


# ---------- USER ADMIN ----------

users_router = APIRouter()


@users_router.get("/users", response_model=List[UserOut])
def list_users(db: Session = Depends(get_db), _admin: User = Depends(require_admin)):
    return IdentityStore(db).list_users()


@users_router.post("/users", response_model=UserOut, status_code=201)
def create_user(payload: UserCreate, db: Session = Depends(get_db), _admin: User = Depends(require_admin)):
    return IdentityStore(db).create_user(
        username=payload.username,
        password=payload.password,
        name=payload.name,
        unit=payload.unit,
        role=payload.role,
    )
