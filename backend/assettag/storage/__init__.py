from assettag.core.config import Settings

from .local_provider import LocalPhotoStorage
from .mock_provider import MockPhotoStorage
from .provider import PhotoStorage


def get_photo_storage(settings: Settings) -> PhotoStorage:
    if settings.photo_storage == "local":
        return LocalPhotoStorage(settings.photo_dir, settings.photo_base_url)
    if settings.photo_storage == "mock":
        return MockPhotoStorage(settings.photo_base_url)
    raise ValueError(f"Unknown PHOTO_STORAGE {settings.photo_storage!r}")
