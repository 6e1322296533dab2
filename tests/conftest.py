import asyncio
import inspect
import itertools

import pytest

from assetdesk.core.errors import RemoteQueryError


def asset_row(id="a1", **overrides):
    """An asset row shaped like the list_assets RPC output (camelCase)."""
    row = {
        "id": id,
        "shareId": "s1",
        "relativePath": f"Marvel/Heroes/{id}.psd",
        "fileName": f"{id}.psd",
        "fileType": "psd",
        "fileSizeBytes": 2 * 1024 * 1024,
        "thumbnailStatus": "done",
        "thumbnailKey": f"https://cdn.example.com/thumbs/{id}.webp",
        "thumbnailError": None,
        "isDeleted": False,
        "createdAt": "2024-03-05T10:00:00Z",
        "updatedAt": "2024-03-06T10:00:00Z",
        "tags": [{"value": "hero", "source": "ai", "confidence": 0.91}],
        "characterIds": [],
        "propertyIds": [],
    }
    row.update(overrides)
    return row


class FakeStore:
    """In-memory QueryStorePort: RPCs answered by handlers, tables by lists of dicts."""

    def __init__(self):
        self.calls = []
        self.rpc_handlers = {}
        self.tables = {}
        self.table_errors = {}
        self._ids = itertools.count(1)

    async def rpc(self, fn, params):
        self.calls.append(("rpc", fn, dict(params)))
        handler = self.rpc_handlers.get(fn)
        if handler is None:
            return None
        result = handler(params)
        if inspect.isawaitable(result):
            result = await result
        return result

    async def select(self, table, columns, *, eq=None, order=None, ascending=True, limit=None):
        self.calls.append(("select", table, {"columns": columns, "eq": eq, "order": order, "limit": limit}))
        if table in self.table_errors:
            raise self.table_errors[table]
        rows = [r for r in self.tables.get(table, []) if all(r.get(k) == v for k, v in (eq or {}).items())]
        if order:
            rows = sorted(rows, key=lambda r: r.get(order), reverse=not ascending)
        if limit is not None:
            rows = rows[:limit]
        return [dict(r) for r in rows]

    async def insert(self, table, values):
        self.calls.append(("insert", table, dict(values)))
        row = {"id": f"{table}-{next(self._ids)}", "created_at": "2024-01-01T00:00:00Z", **values}
        self.tables.setdefault(table, []).append(row)
        return [dict(row)]

    async def update(self, table, values, *, eq):
        self.calls.append(("update", table, dict(values), dict(eq)))
        matched = []
        for r in self.tables.get(table, []):
            if all(r.get(k) == v for k, v in eq.items()):
                r.update(values)
                matched.append(dict(r))
        return matched

    def rpc_calls(self, fn):
        return [c[2] for c in self.calls if c[0] == "rpc" and c[1] == fn]


def failing(message, status=500):
    def handler(_params):
        raise RemoteQueryError(message, status=status)
    return handler


async def drain(rounds=10):
    """Let pending tasks run until they block again."""
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def store():
    return FakeStore()
