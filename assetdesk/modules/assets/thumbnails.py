"""Presentation of the thumbnail lifecycle.

The render worker drives ``pending -> render_queued -> generating -> done | error``;
this module only maps the current status to what a card or drawer shows.
Every status has an entry, and anything unrecognised takes the explicit
``NO_THUMBNAIL`` arm instead of raising.
"""
from typing import Literal
from pydantic import BaseModel, ConfigDict
from assetdesk.platform.ports.object_storage import ObjectStoragePort
from assetdesk.modules.assets.schemas import Asset

ThumbnailKind = Literal["image", "pending", "queued", "generating", "error", "none"]

UNKNOWN_ERROR = "unknown"
_DIRECT_PREFIXES = ("http://", "https://", "data:", "blob:", "/")

class ThumbnailPresentation(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: ThumbnailKind
    label: str
    icon: str
    in_progress: bool = False
    animated: bool = False
    url: str | None = None
    error: str | None = None

NO_THUMBNAIL = ThumbnailPresentation(kind="none", label="No thumbnail", icon="file-image")

_IN_PROGRESS: dict[str, ThumbnailPresentation] = {
    "pending": ThumbnailPresentation(kind="pending", label="Pending", icon="clock", in_progress=True),
    "render_queued": ThumbnailPresentation(kind="queued", label="Queued", icon="loader", in_progress=True, animated=True),
    "generating": ThumbnailPresentation(kind="generating", label="Generating", icon="loader", in_progress=True, animated=True),
}

def resolve_thumbnail_url(key: str, storage: ObjectStoragePort | None = None, expires_seconds: int = 900) -> str:
    """Keys that are already locators are used as is; bare object keys go through storage."""
    if key.startswith(_DIRECT_PREFIXES) or storage is None:
        return key
    return storage.presign_download(key, expires_seconds=expires_seconds)

def present_thumbnail(
    status: str | None,
    key: str | None = None,
    error: str | None = None,
    *,
    storage: ObjectStoragePort | None = None,
    expires_seconds: int = 900,
) -> ThumbnailPresentation:
    if status == "done":
        if not key:
            return NO_THUMBNAIL
        return ThumbnailPresentation(
            kind="image",
            label="Thumbnail",
            icon="image",
            url=resolve_thumbnail_url(key, storage, expires_seconds),
        )
    if status == "error":
        return ThumbnailPresentation(kind="error", label="Error", icon="alert-triangle", error=error or UNKNOWN_ERROR)
    if status in _IN_PROGRESS:
        return _IN_PROGRESS[status]
    return NO_THUMBNAIL

def present_asset_thumbnail(asset: Asset, storage: ObjectStoragePort | None = None, expires_seconds: int = 900) -> ThumbnailPresentation:
    return present_thumbnail(
        asset.thumbnail_status,
        asset.thumbnail_key,
        asset.thumbnail_error,
        storage=storage,
        expires_seconds=expires_seconds,
    )

def status_label(status: str | None) -> str:
    return (status or "").replace("_", " ")

def status_tone(status: str | None) -> str:
    if status == "done":
        return "success"
    if status == "error":
        return "warning"
    return "muted"
