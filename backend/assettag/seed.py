"""Load demo users and assets into the configured database (DEV ONLY)."""

from assettag.core.config import settings
from assettag.core.database import init_db, make_engine, make_session_factory
from assettag.core.logging import setup_logging
from assettag.core.seed import seed_default_admin
from assettag.services.identity import IdentityStore
from assettag.services.reconciliation import ReconciliationEngine

USERS = [
    {"username": "tech1", "name": "Rig 1 Technician", "unit": "RIG-1", "role": "technician", "password": "tech123"},
    {"username": "mech2", "name": "Rig 2 Mechanic", "unit": "RIG-2", "role": "mechanic", "password": "mech123"},
]

ASSETS = [
    {
        "assetNumber": "AST-001",
        "description": "Mud Pump #1",
        "assetGroup": "Pumps",
        "safetyCriticality": "Critical",
        "make": "National",
        "model": "12-P-160",
        "unit": "RIG-1",
        "location": "Pump House",
    },
    {
        "assetNumber": "AST-002",
        "description": "Top Drive",
        "assetGroup": "Drilling",
        "make": "NOV",
        "model": "TDS-11SA",
        "unit": "RIG-1",
        "location": "Derrick",
    },
    {
        "assetNumber": "AST-003",
        "description": "Generator Set",
        "assetGroup": "Power",
        "make": "Caterpillar",
        "model": "3512",
        "serialNumber": 35120042,
        "unit": "RIG-2",
        "location": "Power House",
    },
]


def seed():
    setup_logging(settings.log_level)
    engine = make_engine(settings.database_url)
    init_db(engine)

    db = make_session_factory(engine)()
    try:
        seed_default_admin(db, settings.default_admin_password)

        identity = IdentityStore(db)
        for u in USERS:
            if identity.find_by_username(u["username"]) is None:
                identity.create_user(**u)

        admin = identity.find_by_username("admin")
        result = ReconciliationEngine(db).import_assets(ASSETS, admin)
        print(f"Database seeded: {result.new_count} new, {result.update_count} updated asset(s)")
    finally:
        db.close()
        engine.dispose()


if __name__ == "__main__":
    seed()
