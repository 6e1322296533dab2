"""View models for the asset grid, list rows, detail drawer, and pagination bar."""
from datetime import datetime
from pydantic import BaseModel
from assetdesk.core.paging import PAGE_SIZE, page_window, total_pages
from assetdesk.platform.ports.object_storage import ObjectStoragePort
from assetdesk.modules.assets.schemas import Asset, AssetDetail
from assetdesk.modules.assets.thumbnails import (
    ThumbnailPresentation, present_asset_thumbnail, status_label, status_tone,
)

EMPTY = "—"

def format_bytes(n: int) -> str:
    if n < 1024:
        return f"{n} B"
    if n < 1024 * 1024:
        return f"{n / 1024:.1f} KB"
    return f"{n / (1024 * 1024):.1f} MB"

def format_megabytes(n: int) -> str:
    return f"{n / (1024 * 1024):.1f} MB" if n else EMPTY

def format_date(value: datetime | None) -> str:
    if value is None:
        return EMPTY
    return f"{value.strftime('%b')} {value.day}, {value.year}"

def directory_of(relative_path: str) -> str:
    return "/".join(relative_path.split("/")[:-1]) or "/"

def plural(n: int, word: str) -> str:
    return f"{n} {word}{'' if n == 1 else 's'}"

def count_label(total: int, loading: bool) -> str:
    return "Loading…" if loading else f"{total:,} file{'' if total == 1 else 's'}"

def confidence_label(confidence: float | None) -> str | None:
    if confidence is None:
        return None
    return f"{round(confidence * 100)}%"

# ---- Grid and list ----

class AssetCardView(BaseModel):
    id: str
    file_name: str
    file_type: str
    directory: str
    tag_count: int
    tag_label: str | None
    thumbnail: ThumbnailPresentation

class AssetListRowView(BaseModel):
    id: str
    file_name: str
    relative_path: str
    file_type: str
    size: str
    status: str
    status_tone: str

def asset_card(asset: Asset, storage: ObjectStoragePort | None = None, expires_seconds: int = 900) -> AssetCardView:
    n = len(asset.tags)
    return AssetCardView(
        id=asset.id,
        file_name=asset.file_name,
        file_type=asset.file_type,
        directory=directory_of(asset.relative_path),
        tag_count=n,
        tag_label=plural(n, "tag") if n else None,
        thumbnail=present_asset_thumbnail(asset, storage, expires_seconds),
    )

def asset_list_row(asset: Asset) -> AssetListRowView:
    return AssetListRowView(
        id=asset.id,
        file_name=asset.file_name,
        relative_path=asset.relative_path,
        file_type=asset.file_type,
        size=format_megabytes(asset.file_size_bytes),
        status=status_label(asset.thumbnail_status),
        status_tone=status_tone(asset.thumbnail_status),
    )

# ---- Pagination ----

class PaginationView(BaseModel):
    page: int
    total: int
    total_pages: int
    pages: list[int]
    has_previous: bool
    has_next: bool
    visible: bool

def pagination_bar(page: int, total: int, page_size: int = PAGE_SIZE) -> PaginationView:
    pages = total_pages(total, page_size)
    return PaginationView(
        page=page,
        total=total,
        total_pages=pages,
        pages=page_window(page, pages),
        has_previous=page > 1,
        has_next=page < pages,
        visible=pages > 1,
    )

# ---- Detail drawer ----

class TagBadgeView(BaseModel):
    value: str
    source: str

class LinkView(BaseModel):
    id: str
    name: str
    studio: str | None = None
    source: str
    confidence: str | None = None

class AssetDetailView(BaseModel):
    id: str
    file_name: str
    relative_path: str
    file_type: str
    size: str
    created: str
    updated: str
    thumbnail: ThumbnailPresentation
    thumbnail_error: str | None
    tags: list[TagBadgeView]
    proposed_tags: list[TagBadgeView]
    characters: list[LinkView]
    properties: list[LinkView]

def asset_detail_view(detail: AssetDetail, storage: ObjectStoragePort | None = None, expires_seconds: int = 900) -> AssetDetailView:
    thumb = present_asset_thumbnail(detail, storage, expires_seconds)
    return AssetDetailView(
        id=detail.id,
        file_name=detail.file_name,
        relative_path=detail.relative_path,
        file_type=detail.file_type.upper(),
        size=format_bytes(detail.file_size_bytes),
        created=format_date(detail.created_at),
        updated=format_date(detail.updated_at),
        thumbnail=thumb,
        thumbnail_error=thumb.error,
        tags=[TagBadgeView(value=t.value, source=t.source) for t in detail.tags],
        proposed_tags=[TagBadgeView(value=t.value, source="proposed") for t in detail.proposed_tags],
        characters=[
            LinkView(id=c.character_id, name=c.name, source=c.source, confidence=confidence_label(c.confidence))
            for c in detail.characters
        ],
        properties=[
            LinkView(id=p.property_id, name=p.name, studio=p.studio or None, source=p.source,
                     confidence=confidence_label(p.confidence))
            for p in detail.properties
        ],
    )
