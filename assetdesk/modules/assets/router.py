from typing import Literal
from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel
from assetdesk.core.config import settings
from assetdesk.core.security import get_session_context
from assetdesk.platform.provider_registry import registry
from assetdesk.modules.identity.service import SessionContext
from assetdesk.modules.assets.controller import AssetDetailResolver, AssetListController
from assetdesk.modules.assets.repository import AssetRepository
from assetdesk.modules.assets.schemas import (
    FILE_TYPES, THUMBNAIL_STATUSES, AssetFileType, AssetFilter, SortBy, SortDir, ThumbnailStatus,
)
from assetdesk.modules.assets.views import (
    AssetCardView, AssetDetailView, AssetListRowView, PaginationView,
    asset_card, asset_detail_view, asset_list_row, count_label, pagination_bar,
)
from assetdesk.modules.catalogs.loaders import CharactersLoader, PropertiesLoader
from assetdesk.modules.catalogs.repository import CatalogRepository
from assetdesk.modules.catalogs.schemas import Character, Property

router = APIRouter()

def asset_repo(ctx: SessionContext = Depends(get_session_context)) -> AssetRepository:
    return AssetRepository(ctx.store)

class AssetListOut(BaseModel):
    view: Literal["grid", "list"]
    cards: list[AssetCardView] = []
    rows: list[AssetListRowView] = []
    total: int
    count_label: str
    count_error: str | None = None
    pagination: PaginationView
    filter: AssetFilter
    has_active_filters: bool

class FilterOptionsOut(BaseModel):
    file_types: list[str]
    thumbnail_statuses: list[str]
    properties: list[Property]
    characters: list[Character]
    show_characters: bool

@router.get("", response_model=AssetListOut)
async def list_assets(
    search: str | None = None,
    file_type: AssetFileType | None = None,
    property_id: str | None = None,
    character_id: str | None = None,
    thumbnail_status: ThumbnailStatus | None = None,
    needs_review: bool | None = None,
    page: int = Query(1, ge=1),
    sort_by: SortBy = "created_at",
    sort_dir: SortDir = "desc",
    view: Literal["grid", "list"] = "grid",
    repo: AssetRepository = Depends(asset_repo),
):
    filter = AssetFilter(
        search=search,
        file_type=(file_type,) if file_type else None,
        property_id=property_id,
        # a character only narrows within its property
        character_id=character_id if property_id else None,
        thumbnail_status=thumbnail_status,
        needs_review=needs_review,
    )
    ctl = AssetListController(repo, filter=filter, page=page, sort_by=sort_by, sort_dir=sort_dir)
    try:
        ctl.start()
        await ctl.settled()
        snap = ctl.snapshot
    finally:
        ctl.close()
    if snap.status == "error":
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=snap.error)

    storage = registry.object_storage()
    return AssetListOut(
        view=view,
        cards=[asset_card(a, storage, settings.THUMBNAIL_URL_TTL_SECONDS) for a in snap.rows] if view == "grid" else [],
        rows=[asset_list_row(a) for a in snap.rows] if view == "list" else [],
        total=snap.total,
        count_label=count_label(snap.total, snap.loading),
        count_error=snap.count_error,
        pagination=pagination_bar(snap.page, snap.total, snap.page_size),
        filter=snap.filter,
        has_active_filters=snap.has_active_filters,
    )

@router.get("/filter-options", response_model=FilterOptionsOut)
async def filter_options(property_id: str | None = None, ctx: SessionContext = Depends(get_session_context)):
    catalogs = CatalogRepository(ctx.store)
    properties = PropertiesLoader(catalogs)
    characters = CharactersLoader(catalogs)
    try:
        properties.mount()
        characters.mount(property_id)
        await properties.settled()
        await characters.settled()
        return FilterOptionsOut(
            file_types=list(FILE_TYPES),
            thumbnail_statuses=list(THUMBNAIL_STATUSES),
            properties=list(properties.items),
            characters=list(characters.items),
            show_characters=bool(property_id),
        )
    finally:
        properties.close()
        characters.close()

@router.get("/{asset_id}", response_model=AssetDetailView)
async def get_asset(asset_id: str, repo: AssetRepository = Depends(asset_repo)):
    resolver = AssetDetailResolver(repo)
    try:
        resolver.select(asset_id)
        await resolver.settled()
        state = resolver.snapshot
    finally:
        resolver.close()
    if state.status == "not_found":
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Asset not found")
    if state.status == "error":
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=state.error)
    return asset_detail_view(state.detail, registry.object_storage(), settings.THUMBNAIL_URL_TTL_SECONDS)
