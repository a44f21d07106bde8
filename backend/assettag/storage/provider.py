from typing import Optional


class PhotoStorage:
    def store(
        self,
        asset_number: str,
        slot: str,
        content: Optional[bytes],
        content_type: Optional[str],
    ) -> str:
        """Persist a photo and return the stable URL that references it."""
        raise NotImplementedError


def photo_key(asset_number: str, slot: str, extension: str = "jpg") -> str:
    clean = asset_number.strip().replace("/", "_").replace("\\", "_").replace("..", "_")
    return f"{clean}_{slot}.{extension}"
