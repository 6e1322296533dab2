import logging
from typing import Any
import httpx
from assetdesk.core.errors import RemoteQueryError
from assetdesk.platform.ports.query_store import QueryStorePort

log = logging.getLogger("store.postgrest")

def _error_from_response(response: httpx.Response) -> RemoteQueryError:
    # PostgREST errors: {"code": "...", "message": "...", "details": ..., "hint": ...}
    message = None
    code = None
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        message = body.get("message") or body.get("error_description") or body.get("error")
        code = body.get("code")
    if not message:
        message = response.text or f"HTTP {response.status_code}"
    return RemoteQueryError(str(message), status=response.status_code, code=str(code) if code else None)

def _eq_params(eq: dict | None) -> dict:
    return {col: f"eq.{val}" for col, val in (eq or {}).items()}

class PostgrestQueryStore(QueryStorePort):
    def __init__(self, client: httpx.AsyncClient, base_url: str, api_key: str, access_token: str | None = None):
        self.client = client
        self.root_url = base_url.rstrip("/")
        self.base_url = self.root_url + "/rest/v1"
        self.api_key = api_key
        self.access_token = access_token

    def with_token(self, access_token: str | None) -> "PostgrestQueryStore":
        return PostgrestQueryStore(self.client, self.root_url, self.api_key, access_token)

    def _headers(self, prefer: str | None = None) -> dict:
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.access_token or self.api_key}",
        }
        if prefer:
            headers["Prefer"] = prefer
        return headers

    async def _request(self, method: str, path: str, *, params: dict | None = None, json: Any = None, prefer: str | None = None) -> Any:
        url = f"{self.base_url}/{path}"
        try:
            response = await self.client.request(method, url, params=params, json=json, headers=self._headers(prefer))
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            err = _error_from_response(e.response)
            log.warning(f"{method} {path} failed: {err!r}")
            raise err from e
        except httpx.RequestError as e:
            log.warning(f"{method} {path} transport error: {e}")
            raise RemoteQueryError(f"Network error: {e}") from e
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            log.warning(f"{method} {path} returned a non-JSON body ({response.status_code})")
            raise RemoteQueryError(f"Invalid JSON from {path}", status=response.status_code) from e

    async def rpc(self, fn: str, params: dict) -> Any:
        return await self._request("POST", f"rpc/{fn}", json=params)

    async def select(self, table: str, columns: str, *, eq: dict | None = None, order: str | None = None,
                     ascending: bool = True, limit: int | None = None) -> list[dict]:
        params = {"select": columns, **_eq_params(eq)}
        if order:
            params["order"] = f"{order}.{'asc' if ascending else 'desc'}"
        if limit is not None:
            params["limit"] = str(limit)
        return await self._request("GET", table, params=params) or []

    async def insert(self, table: str, values: dict) -> list[dict]:
        return await self._request("POST", table, json=values, prefer="return=representation") or []

    async def update(self, table: str, values: dict, *, eq: dict) -> list[dict]:
        if not eq:
            raise ValueError("update requires at least one equality filter")
        return await self._request("PATCH", table, params=_eq_params(eq), json=values, prefer="return=representation") or []
