import logging
from typing import Literal
from pydantic import BaseModel, ConfigDict, Field
from assetdesk.core.cycles import FetchCycleOwner
from assetdesk.core.errors import RemoteQueryError
from assetdesk.core.paging import PAGE_SIZE, clamp_page, total_pages
from assetdesk.modules.assets.params import build_list_params, has_active_filters
from assetdesk.modules.assets.repository import AssetRepository
from assetdesk.modules.assets.schemas import (
    Asset, AssetDetail, AssetFilter, ListAssetsParams, SortBy, SortDir,
)

logger = logging.getLogger(__name__)

FetchStatus = Literal["idle", "loading", "success", "error"]
DetailStatus = Literal["idle", "loading", "found", "not_found", "error"]

def _message(exc: Exception) -> str:
    return getattr(exc, "message", None) or str(exc) or type(exc).__name__

# ---- Asset list ----

class AssetListSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: FetchStatus = "idle"
    rows: tuple[Asset, ...] = ()
    total: int = 0
    loading: bool = False
    error: str | None = None
    count_error: str | None = None
    filter: AssetFilter = Field(default_factory=AssetFilter)
    page: int = 1
    page_size: int = PAGE_SIZE
    total_pages: int = 0
    sort_by: SortBy = "created_at"
    sort_dir: SortDir = "desc"
    params: ListAssetsParams | None = None
    has_active_filters: bool = False

class AssetListController(FetchCycleOwner):
    """Owns filter, page, and sort for one asset list and keeps its page of rows current.

    Any change that alters the effective ``ListAssetsParams`` (compared by
    value) starts a new fetch cycle. A failed cycle keeps the rows and total
    of the last good one and reports the message in ``error``.
    """

    def __init__(self, repo: AssetRepository, *, filter: AssetFilter | None = None, page: int = 1,
                 page_size: int = PAGE_SIZE, sort_by: SortBy = "created_at", sort_dir: SortDir = "desc"):
        super().__init__()
        self.repo = repo
        self._filter = filter or AssetFilter()
        self._page = clamp_page(page, 0)
        self._page_size = min(page_size, PAGE_SIZE)
        self._sort_by: SortBy = sort_by
        self._sort_dir: SortDir = sort_dir
        self._status: FetchStatus = "idle"
        self._rows: tuple[Asset, ...] = ()
        self._total = 0
        self._total_known = False
        self._error: str | None = None
        self._count_error: str | None = None
        self._params: ListAssetsParams | None = None

    @property
    def snapshot(self) -> AssetListSnapshot:
        return AssetListSnapshot(
            status=self._status,
            rows=self._rows,
            total=self._total,
            loading=self._status == "loading",
            error=self._error,
            count_error=self._count_error,
            filter=self._filter,
            page=self._page,
            page_size=self._page_size,
            total_pages=total_pages(self._total, self._page_size),
            sort_by=self._sort_by,
            sort_dir=self._sort_dir,
            params=self._params,
            has_active_filters=has_active_filters(self._filter),
        )

    # ---- inputs ----

    def start(self):
        return self._dispatch()

    def set_filter(self, filter: AssetFilter):
        self._filter = filter
        self._page = 1
        return self._dispatch()

    def set_page(self, page: int):
        pages = max(total_pages(self._total, self._page_size), 1) if self._total_known else 0
        self._page = clamp_page(page, pages)
        return self._dispatch()

    def set_sort(self, sort_by: SortBy, sort_dir: SortDir = "desc"):
        self._sort_by = sort_by
        self._sort_dir = sort_dir
        return self._dispatch()

    def refetch(self):
        return self._dispatch(force=True)

    # ---- fetch cycle ----

    def _dispatch(self, force: bool = False):
        self._ensure_open()
        params = build_list_params(self._filter, self._page, self._page_size, self._sort_by, self._sort_dir)
        if not force and params == self._params:
            return None
        self._params = params
        generation = self._next_generation()
        self._status = "loading"
        self._error = None
        self._notify()
        return self._spawn(self._run(generation, params))

    async def _run(self, generation: int, params: ListAssetsParams) -> None:
        try:
            page = await self.repo.fetch_page(params)
        except RemoteQueryError as e:
            self._fail(generation, _message(e))
            return
        except Exception as e:
            logger.exception("Asset fetch cycle crashed")
            self._fail(generation, _message(e))
            return

        if not self._is_current(generation):
            logger.debug(f"Dropping superseded asset page (generation {generation})")
            return

        self._rows = tuple(page.rows)
        self._total = page.total
        self._count_error = page.count_error
        self._total_known = page.count_error is None
        self._status = "success"

        pages = total_pages(self._total, self._page_size)
        if self._total_known and pages >= 1 and self._page > pages:
            logger.info(f"Page {self._page} is past the last page ({pages}), moving to it")
            self._page = pages
            self._dispatch()
            return
        self._notify()

    def _fail(self, generation: int, message: str) -> None:
        if not self._is_current(generation):
            logger.debug(f"Dropping superseded asset error (generation {generation}): {message}")
            return
        logger.warning(f"Asset fetch failed: {message}")
        self._status = "error"
        self._error = message
        self._notify()

# ---- Asset detail ----

class AssetDetailState(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: DetailStatus = "idle"
    asset_id: str | None = None
    detail: AssetDetail | None = None
    loading: bool = False
    error: str | None = None

class AssetDetailResolver(FetchCycleOwner):
    """Fetches the detail of the selected asset; a newer selection always wins."""

    def __init__(self, repo: AssetRepository):
        super().__init__()
        self.repo = repo
        self._state = AssetDetailState()

    @property
    def snapshot(self) -> AssetDetailState:
        return self._state

    @property
    def asset_id(self) -> str | None:
        return self._state.asset_id

    def select(self, asset_id: str | None):
        self._ensure_open()
        asset_id = asset_id or None
        if asset_id is not None and asset_id == self._state.asset_id and self._state.status != "error":
            return self._task
        return self._resolve_now(asset_id)

    def refresh(self):
        self._ensure_open()
        return self._resolve_now(self._state.asset_id)

    def _resolve_now(self, asset_id: str | None):
        generation = self._next_generation()
        if asset_id is None:
            self._state = AssetDetailState()
            self._task = None
            self._notify()
            return None
        self._state = AssetDetailState(status="loading", asset_id=asset_id, loading=True)
        self._notify()
        return self._spawn(self._resolve(generation, asset_id))

    async def _resolve(self, generation: int, asset_id: str) -> None:
        try:
            detail = await self.repo.get_detail(asset_id)
        except RemoteQueryError as e:
            state = AssetDetailState(status="error", asset_id=asset_id, error=_message(e))
        except Exception as e:
            logger.exception(f"Asset detail for {asset_id} crashed")
            state = AssetDetailState(status="error", asset_id=asset_id, error=_message(e))
        else:
            if detail is None:
                state = AssetDetailState(status="not_found", asset_id=asset_id)
            else:
                state = AssetDetailState(status="found", asset_id=asset_id, detail=detail)

        if not self._is_current(generation) or asset_id != self._state.asset_id:
            logger.debug(f"Dropping late detail for {asset_id}")
            return
        self._state = state
        self._notify()
