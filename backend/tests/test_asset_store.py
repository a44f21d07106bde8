import pytest

from assettag.core.database import init_db, make_engine, make_session_factory
from assettag.core.errors import ConflictError
from assettag.models.asset import Asset
from assettag.services.asset_store import AssetStore


def _asset(number: str, unit: str = "U1") -> Asset:
    return Asset(asset_number=number, description=f"Asset {number}", unit=unit)


def test_save_inserts_then_finds(db):
    store = AssetStore(db)
    store.save(_asset("S-1"))
    db.commit()

    found = store.find_by_key("S-1")
    assert found is not None
    assert found.version == 1
    assert store.find_by_key("S-2") is None


def test_save_duplicate_insert_is_conflict(db):
    store = AssetStore(db)
    store.save(_asset("S-1"))
    db.commit()

    with pytest.raises(ConflictError):
        store.save(_asset("S-1", unit="U2"))


def test_overwrite_bumps_version(db):
    store = AssetStore(db)
    asset = store.save(_asset("S-1"))
    db.commit()

    asset.remarks = "updated"
    store.save(asset)
    db.commit()

    assert store.find_by_key("S-1").version == 2


def test_find_by_unit_and_all(db):
    store = AssetStore(db)
    for number, unit in (("S-1", "U1"), ("S-2", "U2"), ("S-3", "U1")):
        store.save(_asset(number, unit))
    db.commit()

    assert sorted(a.asset_number for a in store.find_by_unit("U1")) == ["S-1", "S-3"]
    assert [a.asset_number for a in store.find_by_unit("U3")] == []
    assert len(store.find_all()) == 3


def test_lost_update_is_detected(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'race.db'}")
    init_db(engine)
    factory = make_session_factory(engine)

    with factory() as setup:
        AssetStore(setup).save(_asset("S-1"))
        setup.commit()

    first, second = factory(), factory()
    try:
        mine = AssetStore(first).find_by_key("S-1")
        theirs = AssetStore(second).find_by_key("S-1")

        theirs.remarks = "second writer"
        AssetStore(second).save(theirs)
        second.commit()

        mine.remarks = "first writer"
        with pytest.raises(ConflictError):
            AssetStore(first).save(mine)
    finally:
        first.close()
        second.close()
        engine.dispose()

    with factory() as check:
        assert AssetStore(check).find_by_key("S-1").remarks == "second writer"
