import pytest
from fastapi.testclient import TestClient

from assettag.core.config import Settings
from assettag.core.database import init_db, make_engine, make_session_factory
from assettag.main import create_app
from assettag.services.identity import IdentityStore
from assettag.services.reconciliation import ReconciliationEngine


@pytest.fixture
def engine():
    engine = make_engine("sqlite://")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = make_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def users(db):
    """One admin plus one field user in each of two units."""
    identity = IdentityStore(db)
    return {
        "admin": identity.create_user(username="admin", password="admin123", name="Admin", unit="ALL", role="admin"),
        "tech": identity.create_user(username="tech1", password="tech123", name="Tech One", unit="U1"),
        "mech": identity.create_user(
            username="mech2", password="mech123", name="Mech Two", unit="U2", role="mechanic"
        ),
    }


@pytest.fixture
def engine_svc(db):
    return ReconciliationEngine(db)


@pytest.fixture
def pump(engine_svc, users):
    return engine_svc.create(
        {"assetNumber": "AST-001", "unit": "U1", "description": "Pump", "make": "National"},
        users["admin"],
    )


# ---------- HTTP ----------


@pytest.fixture
def client():
    app = create_app(Settings(database_url="sqlite://", default_admin_password="admin123", log_level="WARNING"))
    with TestClient(app) as c:
        yield c


def login(client: TestClient, username: str, password: str) -> dict:
    resp = client.post("/api/auth/login", json={"username": username, "password": password})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


@pytest.fixture
def admin_headers(client):
    return login(client, "admin", "admin123")


@pytest.fixture
def tech_headers(client, admin_headers):
    for body in (
        {"username": "tech1", "password": "tech123", "name": "Tech One", "unit": "U1"},
        {"username": "mech2", "password": "mech123", "name": "Mech Two", "unit": "U2", "role": "mechanic"},
    ):
        resp = client.post("/api/users", json=body, headers=admin_headers)
        assert resp.status_code == 201, resp.text
    return login(client, "tech1", "tech123")
