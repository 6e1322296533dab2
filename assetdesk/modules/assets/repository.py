import asyncio
import logging
from typing import Any
from pydantic import ValidationError
from assetdesk.core.errors import RemoteQueryError
from assetdesk.platform.ports.query_store import QueryStorePort
from assetdesk.modules.assets.params import count_payload, list_payload
from assetdesk.modules.assets.schemas import Asset, AssetDetail, AssetPage, ListAssetsParams

logger = logging.getLogger(__name__)

LIST_RPC = "list_assets"
COUNT_RPC = "count_assets"
DETAIL_RPC = "get_asset_detail"

def normalize_asset_row(row: dict) -> Asset:
    try:
        return Asset.model_validate(row)
    except ValidationError as e:
        raise RemoteQueryError(f"Malformed asset row {row.get('id', '?')}: {e.error_count()} invalid field(s)") from e

def normalize_detail_row(row: dict) -> AssetDetail:
    try:
        return AssetDetail.model_validate(row)
    except ValidationError as e:
        raise RemoteQueryError(f"Malformed asset detail {row.get('id', '?')}: {e.error_count()} invalid field(s)") from e

def _as_total(data: Any) -> int:
    # count RPC answers a bare scalar, PostgREST may wrap it as [{"count_assets": n}]
    if isinstance(data, list):
        data = data[0] if data else 0
    if isinstance(data, dict):
        data = next(iter(data.values()), 0)
    try:
        return max(int(data or 0), 0)
    except (TypeError, ValueError):
        logger.warning(f"Unreadable asset count {data!r}, treating as 0")
        return 0

class AssetRepository:
    def __init__(self, store: QueryStorePort):
        self.store = store

    async def fetch_page(self, params: ListAssetsParams) -> AssetPage:
        """One fetch cycle: rows and total, queried concurrently with the same predicates.

        A failed row query fails the cycle. A failed count only costs the total.
        """
        rows_result, count_result = await asyncio.gather(
            self.store.rpc(LIST_RPC, list_payload(params)),
            self.store.rpc(COUNT_RPC, count_payload(params)),
            return_exceptions=True,
        )
        if isinstance(rows_result, BaseException):
            if isinstance(rows_result, RemoteQueryError) or not isinstance(rows_result, Exception):
                raise rows_result
            raise RemoteQueryError(f"Asset listing failed: {rows_result}") from rows_result

        rows = [normalize_asset_row(r) for r in (rows_result or [])]

        count_error = None
        if isinstance(count_result, BaseException):
            if not isinstance(count_result, Exception):
                raise count_result
            count_error = getattr(count_result, "message", None) or str(count_result)
            logger.warning(f"Asset count failed, total unknown: {count_error}")
            total = 0
        else:
            total = _as_total(count_result)
        return AssetPage(rows=rows, total=total, count_error=count_error)

    async def get_detail(self, asset_id: str) -> AssetDetail | None:
        data = await self.store.rpc(DETAIL_RPC, {"p_asset_id": asset_id})
        if isinstance(data, list):
            data = data[0] if data else None
        if not data:
            return None
        return normalize_detail_row(data)
