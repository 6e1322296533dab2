"""Turn a filter bar selection into the parameters of the asset list RPCs."""
from assetdesk.core.paging import PAGE_SIZE, offset_for
from assetdesk.modules.assets.schemas import AssetFilter, ListAssetsParams, SortBy, SortDir

def _blank_to_none(value):
    if value is None:
        return None
    if isinstance(value, str):
        # whitespace only counts as empty; real text goes out as typed
        return value if value.strip() else None
    return value

def build_list_params(
    filter: AssetFilter | None = None,
    page: int = 1,
    page_size: int = PAGE_SIZE,
    sort_by: SortBy = "created_at",
    sort_dir: SortDir = "desc",
) -> ListAssetsParams:
    """Pure: ``offset = (page - 1) * page_size``; unset or empty fields mean no restriction."""
    if page_size <= 0:
        raise ValueError(f"page_size must be > 0, got {page_size}")
    page_size = min(page_size, PAGE_SIZE)
    f = filter or AssetFilter()
    return ListAssetsParams(
        search=_blank_to_none(f.search),
        file_type=f.file_type[0] if f.file_type else None,
        property_id=_blank_to_none(f.property_id),
        character_id=_blank_to_none(f.character_id),
        thumbnail_status=f.thumbnail_status or None,
        # an unchecked "needs review" box does not restrict
        needs_review=True if f.needs_review else None,
        limit=page_size,
        offset=offset_for(page, page_size),
        sort_by=sort_by,
        sort_dir=sort_dir,
    )

def filter_predicates(params: ListAssetsParams) -> dict:
    """The predicate part shared by ``list_assets`` and ``count_assets``."""
    return {
        "p_search": params.search,
        "p_file_type": params.file_type,
        "p_thumbnail_status": params.thumbnail_status,
        "p_character_id": params.character_id,
        "p_property_id": params.property_id,
        "p_needs_review": params.needs_review,
    }

def list_payload(params: ListAssetsParams) -> dict:
    return {
        **filter_predicates(params),
        "p_limit": params.limit,
        "p_offset": params.offset,
        "p_sort_by": params.sort_by,
        "p_sort_dir": params.sort_dir,
    }

def count_payload(params: ListAssetsParams) -> dict:
    return filter_predicates(params)

def has_active_filters(filter: AssetFilter) -> bool:
    return bool(
        _blank_to_none(filter.search)
        or filter.file_type
        or _blank_to_none(filter.property_id)
        or _blank_to_none(filter.character_id)
        or filter.thumbnail_status
        or filter.needs_review
    )

def select_property(filter: AssetFilter, property_id: str | None) -> AssetFilter:
    # characters belong to one property, so a new property drops the character
    return filter.model_copy(update={"property_id": _blank_to_none(property_id), "character_id": None})

def select_character(filter: AssetFilter, character_id: str | None) -> AssetFilter:
    return filter.model_copy(update={"character_id": _blank_to_none(character_id)})

def clear_filters() -> AssetFilter:
    return AssetFilter()
