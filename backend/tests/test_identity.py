import pytest

from assettag.core.errors import AuthError, ConflictError, ForbiddenError, ValidationError
from assettag.core.security import create_access_token, decode_token, hash_password, verify_password
from assettag.core.seed import seed_default_admin
from assettag.models.user import User
from assettag.services.identity import IdentityStore, ensure_unit_access, require_admin, visible_unit


def test_password_hashing():
    hashed = hash_password("s3cret")
    assert hashed.startswith("$pbkdf2-sha256$")
    assert verify_password("s3cret", hashed)
    assert not verify_password("wrong", hashed)
    assert not verify_password("s3cret", None)
    assert not verify_password("s3cret", "s3cret")


def test_token_round_trip_carries_identity():
    payload = decode_token(create_access_token({"sub": "7", "username": "tech1", "role": "technician"}))
    assert (payload["sub"], payload["username"], payload["role"]) == ("7", "tech1", "technician")
    assert "exp" in payload

    with pytest.raises(ValueError):
        decode_token("not-a-token")


def test_authenticate_sets_last_login(db, users):
    assert users["tech"].last_login is None

    user = IdentityStore(db).authenticate("tech1", "tech123")

    assert user.username == "tech1"
    assert user.last_login is not None


def test_wrong_password_does_not_touch_last_login(db, users):
    with pytest.raises(AuthError):
        IdentityStore(db).authenticate("tech1", "nope")

    db.refresh(users["tech"])
    assert users["tech"].last_login is None


def test_unknown_and_inactive_users_fail(db, users):
    identity = IdentityStore(db)
    with pytest.raises(AuthError):
        identity.authenticate("ghost", "x")

    users["mech"].is_active = False
    db.commit()
    with pytest.raises(AuthError):
        identity.authenticate("mech2", "mech123")


def test_change_password_clears_first_login(db, users):
    identity = IdentityStore(db)
    assert users["tech"].first_login is True

    identity.change_password(users["tech"], "n3w-pass")
    assert users["tech"].first_login is False
    assert identity.authenticate("tech1", "n3w-pass").first_login is False

    identity.change_password(users["tech"], "again")
    assert users["tech"].first_login is False


def test_create_user_validation(db, users):
    identity = IdentityStore(db)
    with pytest.raises(ConflictError):
        identity.create_user(username="tech1", password="x", name="Dup", unit="U1")
    with pytest.raises(ValidationError):
        identity.create_user(username="boss", password="x", name="Boss", unit="U1", role="owner")
    with pytest.raises(ValidationError):
        identity.create_user(username="blank", password="x", name="Blank", unit=" ")


def test_count_non_admin(db, users):
    assert IdentityStore(db).count_non_admin() == 2


def test_unit_scoping_helpers(users):
    assert visible_unit(users["admin"]) is None
    assert visible_unit(users["tech"]) == "U1"

    ensure_unit_access(users["admin"], "U2")
    ensure_unit_access(users["tech"], "U1")
    with pytest.raises(ForbiddenError):
        ensure_unit_access(users["tech"], "U2")

    require_admin(users["admin"])
    with pytest.raises(ForbiddenError):
        require_admin(users["mech"])


def test_seed_default_admin_once(db):
    assert seed_default_admin(db, "admin123") is True
    assert seed_default_admin(db, "other") is False

    admin = db.query(User).filter(User.username == "admin").one()
    assert admin.role == "admin"
    assert admin.unit == "ALL"
    assert admin.first_login is True
    assert verify_password("admin123", admin.password_hash)
