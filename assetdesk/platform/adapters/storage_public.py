from urllib.parse import quote
from assetdesk.platform.ports.object_storage import ObjectStoragePort

class PublicBucketStorage(ObjectStoragePort):
    """Objects served from a public CDN/bucket URL; nothing to sign."""

    def __init__(self, public_base_url: str | None):
        self.public_base_url = (public_base_url or "").rstrip("/")

    def presign_download(self, key: str, expires_seconds: int = 900) -> str:
        path = quote(key.lstrip("/"))
        if not self.public_base_url:
            return f"/{path}"
        return f"{self.public_base_url}/{path}"
