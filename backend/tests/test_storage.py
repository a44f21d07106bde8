import pytest

from assettag.core.config import Settings
from assettag.storage import LocalPhotoStorage, MockPhotoStorage, get_photo_storage
from assettag.storage.provider import photo_key


def test_photo_key_is_path_safe():
    assert photo_key("AST-001", "A") == "AST-001_A.jpg"
    assert photo_key("../etc/AST", "B", "png") == "__etc_AST_B.png"


def test_mock_storage_url():
    storage = MockPhotoStorage("https://drive.google.com/mock")
    assert storage.store("AST 9", "B", None, None) == "https://drive.google.com/mock/AST%209_B.jpg"


def test_local_storage_writes_bytes(tmp_path):
    storage = LocalPhotoStorage(str(tmp_path / "photos"), "http://localhost:8000/photos/")

    url = storage.store("AST-001", "C", b"png-bytes", "image/png")

    assert url == "http://localhost:8000/photos/AST-001_C.png"
    assert (tmp_path / "photos" / "AST-001_C.png").read_bytes() == b"png-bytes"


def test_storage_factory(tmp_path):
    assert isinstance(get_photo_storage(Settings(photo_storage="mock")), MockPhotoStorage)
    local = get_photo_storage(Settings(photo_storage="local", photo_dir=str(tmp_path)))
    assert isinstance(local, LocalPhotoStorage)

    with pytest.raises(ValueError):
        get_photo_storage(Settings(photo_storage="s3"))
