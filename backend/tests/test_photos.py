import pytest

from assettag.core.errors import ForbiddenError, InvalidSlotError, NotFoundError
from assettag.models.audit_log import AuditLog
from assettag.services.photos import PhotoTracker, compute_is_complete, normalize_slot
from assettag.storage import MockPhotoStorage


def test_compute_is_complete_requires_all_four_slots():
    assert compute_is_complete({"A": "a", "B": "b", "C": "c", "D": "d"}) is True
    assert compute_is_complete({"A": "a", "B": "b", "C": "c", "D": None}) is False
    assert compute_is_complete({"A": "a", "B": "", "C": "c", "D": "d"}) is False
    assert compute_is_complete({}) is False


def test_normalize_slot():
    assert normalize_slot("b") == "B"
    assert normalize_slot(" D ") == "D"
    with pytest.raises(InvalidSlotError):
        normalize_slot("E")


def test_completion_follows_fourth_photo(db, users, pump):
    tracker = PhotoTracker(db)

    for slot in ("A", "B", "C"):
        result = tracker.set_photo("AST-001", slot, f"https://photos/{slot}.jpg", users["admin"])
        assert result.is_complete is False

    result = tracker.set_photo("AST-001", "D", "https://photos/D.jpg", users["tech"])

    assert result.is_complete is True
    assert result.photo_url == "https://photos/D.jpg"
    assert result.asset.assigned_to == "tech1"
    assert result.asset.photos == {
        "A": "https://photos/A.jpg",
        "B": "https://photos/B.jpg",
        "C": "https://photos/C.jpg",
        "D": "https://photos/D.jpg",
    }


def test_replacing_a_photo_keeps_completion(db, users, pump):
    tracker = PhotoTracker(db)
    for slot in "ABCD":
        tracker.set_photo("AST-001", slot, f"ref-{slot}", users["tech"])

    result = tracker.set_photo("AST-001", "a", "ref-A2", users["tech"])

    assert result.is_complete is True
    assert result.asset.photo_a == "ref-A2"


def test_unknown_asset_is_not_found(db, users):
    with pytest.raises(NotFoundError):
        PhotoTracker(db).set_photo("NOPE-1", "A", "ref", users["admin"])


def test_unknown_slot_is_rejected(db, users, pump):
    with pytest.raises(InvalidSlotError):
        PhotoTracker(db).set_photo("AST-001", "Z", "ref", users["admin"])


def test_other_unit_cannot_set_photo(db, users, pump):
    with pytest.raises(ForbiddenError):
        PhotoTracker(db).set_photo("AST-001", "A", "ref", users["mech"])


def test_upload_uses_storage_reference(db, users, pump):
    storage = MockPhotoStorage("https://drive.example.com/mock/")

    result = PhotoTracker(db).upload("AST-001", "C", storage, users["tech"], content=b"jpeg")

    assert result.photo_url == "https://drive.example.com/mock/AST-001_C.jpg"
    assert result.asset.photo_c == result.photo_url

    log = db.query(AuditLog).filter(AuditLog.action == "photo_upload").one()
    assert log.actor == "tech1"
    assert log.fields == "is_complete,photo_c"


def test_upload_validates_before_storing(db, users):
    class ExplodingStorage(MockPhotoStorage):
        def store(self, *args, **kwargs):
            raise AssertionError("storage must not be called")

    with pytest.raises(NotFoundError):
        PhotoTracker(db).upload("NOPE-1", "A", ExplodingStorage("x"), users["admin"])
