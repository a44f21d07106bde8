from typing import Optional
from urllib.parse import quote

from .provider import PhotoStorage, photo_key


class MockPhotoStorage(PhotoStorage):
    """Hands out deterministic URLs without keeping the bytes."""

    def __init__(self, base_url: str):
        self.base_url = base_url.rstrip("/")

    def store(self, asset_number: str, slot: str, content: Optional[bytes], content_type: Optional[str]) -> str:
        return f"{self.base_url}/{quote(photo_key(asset_number, slot))}"
