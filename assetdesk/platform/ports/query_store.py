from typing import Any, Protocol, runtime_checkable

@runtime_checkable
class QueryStorePort(Protocol):
    """Row storage with remote procedures. Implementations raise RemoteQueryError."""

    async def rpc(self, fn: str, params: dict) -> Any: ...

    async def select(
        self,
        table: str,
        columns: str,
        *,
        eq: dict | None = None,
        order: str | None = None,
        ascending: bool = True,
        limit: int | None = None,
    ) -> list[dict]: ...

    async def insert(self, table: str, values: dict) -> list[dict]: ...

    async def update(self, table: str, values: dict, *, eq: dict) -> list[dict]: ...
