"""
Local filesystem photo storage for development.
Saves uploads to a directory and serves them under ``base_url``.
"""
from pathlib import Path
from typing import Optional
from urllib.parse import quote

import structlog

from .provider import PhotoStorage, photo_key

log = structlog.get_logger(__name__)

EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/heic": "heic",
}


class LocalPhotoStorage(PhotoStorage):
    def __init__(self, base_dir: str, base_url: str):
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self.base_url = base_url.rstrip("/")

    def store(self, asset_number: str, slot: str, content: Optional[bytes], content_type: Optional[str]) -> str:
        key = photo_key(asset_number, slot, EXTENSIONS.get(content_type or "", "jpg"))
        path = self.base_dir / key

        if content:
            path.write_bytes(content)
            log.info("photo_stored", key=key, size=len(content))
        else:
            log.warning("photo_upload_empty", key=key)

        return f"{self.base_url}/{quote(key)}"
