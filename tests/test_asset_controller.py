import asyncio

import pytest
from conftest import asset_row, drain

from assetdesk.core.errors import RemoteQueryError
from assetdesk.modules.assets.controller import AssetListController
from assetdesk.modules.assets.repository import AssetRepository
from assetdesk.modules.assets.schemas import Asset, AssetFilter, AssetPage


def _page(*ids, total=None):
    rows = [Asset.model_validate(asset_row(i)) for i in ids]
    return AssetPage(rows=rows, total=len(rows) if total is None else total)


class GatedRepo:
    """Every fetch waits for the test to resolve it."""

    def __init__(self):
        self.calls = []

    async def fetch_page(self, params):
        fut = asyncio.get_running_loop().create_future()
        self.calls.append((params, fut))
        return await fut


class ScriptedRepo:
    def __init__(self, respond):
        self.respond = respond
        self.calls = []

    async def fetch_page(self, params):
        self.calls.append(params)
        result = self.respond(params)
        if isinstance(result, Exception):
            raise result
        return result


@pytest.mark.asyncio
async def test_start_loads_first_page(store):
    store.rpc_handlers["list_assets"] = lambda p: [asset_row("a1")]
    store.rpc_handlers["count_assets"] = lambda p: 1
    ctl = AssetListController(AssetRepository(store))
    seen = []
    ctl.subscribe(lambda snap: seen.append(snap.status))

    assert ctl.snapshot.status == "idle"
    ctl.start()
    assert ctl.snapshot.loading is True
    await ctl.settled()

    snap = ctl.snapshot
    assert seen == ["loading", "success"]
    assert snap.status == "success"
    assert snap.loading is False
    assert snap.error is None
    assert [a.id for a in snap.rows] == ["a1"]
    assert snap.params.limit == 48 and snap.params.offset == 0
    assert snap.params.sort_by == "created_at" and snap.params.sort_dir == "desc"


@pytest.mark.asyncio
async def test_newer_cycle_wins_over_late_older_one():
    repo = GatedRepo()
    ctl = AssetListController(repo)
    ctl.start()
    await drain()
    ctl.set_filter(AssetFilter(search="new"))
    await drain()
    assert len(repo.calls) == 2
    (_, older), (newer_params, newer) = repo.calls
    assert newer_params.search == "new"

    newer.set_result(_page("fresh", total=1))
    await drain()
    older.set_result(_page("stale1", "stale2", total=500))
    await drain()

    snap = ctl.snapshot
    assert [a.id for a in snap.rows] == ["fresh"]
    assert snap.total == 1
    assert snap.status == "success"


@pytest.mark.asyncio
async def test_late_error_from_older_cycle_is_ignored():
    repo = GatedRepo()
    ctl = AssetListController(repo)
    ctl.start()
    await drain()
    ctl.set_page(2)
    await drain()
    (_, older), (_, newer) = repo.calls
    newer.set_result(_page("p2", total=60))
    await drain()
    older.set_exception(RemoteQueryError("timeout"))
    await drain()
    assert ctl.snapshot.status == "success"
    assert ctl.snapshot.error is None


@pytest.mark.asyncio
async def test_equal_params_do_not_start_a_cycle():
    repo = ScriptedRepo(lambda p: _page("a1"))
    ctl = AssetListController(repo)
    ctl.start()
    await ctl.settled()
    assert ctl.set_filter(AssetFilter()) is None
    assert ctl.set_page(1) is None
    assert ctl.set_sort("created_at", "desc") is None
    assert len(repo.calls) == 1


@pytest.mark.asyncio
async def test_refetch_reissues_same_params_with_same_outcome():
    repo = ScriptedRepo(lambda p: _page("a1", "a2", total=100))
    ctl = AssetListController(repo)
    ctl.start()
    await ctl.settled()
    first = ctl.snapshot
    ctl.refetch()
    await ctl.settled()
    second = ctl.snapshot
    assert len(repo.calls) == 2
    assert repo.calls[0] == repo.calls[1]
    assert first.total_pages == second.total_pages == 3
    assert len(first.rows) == len(second.rows)


@pytest.mark.asyncio
async def test_filter_change_resets_page_but_page_change_keeps_filter():
    repo = ScriptedRepo(lambda p: _page("a1", total=500))
    ctl = AssetListController(repo)
    ctl.start()
    await ctl.settled()

    ctl.set_filter(AssetFilter(property_id="P1"))
    await ctl.settled()
    ctl.set_page(3)
    await ctl.settled()
    assert ctl.snapshot.page == 3
    assert ctl.snapshot.filter.property_id == "P1"
    assert repo.calls[-1].property_id == "P1"
    assert repo.calls[-1].offset == 96

    ctl.set_sort("file_name", "asc")
    await ctl.settled()
    assert ctl.snapshot.page == 3
    assert repo.calls[-1].sort_by == "file_name"

    ctl.set_filter(AssetFilter(property_id="P2"))
    await ctl.settled()
    assert ctl.snapshot.page == 1
    assert repo.calls[-1].offset == 0


@pytest.mark.asyncio
async def test_error_keeps_previous_rows_and_total():
    outcomes = [_page("a1", "a2", total=2), RemoteQueryError("network down")]
    repo = ScriptedRepo(lambda p: outcomes.pop(0))
    ctl = AssetListController(repo)
    ctl.start()
    await ctl.settled()
    ctl.refetch()
    await ctl.settled()

    snap = ctl.snapshot
    assert snap.status == "error"
    assert snap.error == "network down"
    assert snap.loading is False
    assert [a.id for a in snap.rows] == ["a1", "a2"]
    assert snap.total == 2


@pytest.mark.asyncio
async def test_first_cycle_error_leaves_empty_state():
    repo = ScriptedRepo(lambda p: RemoteQueryError("boom"))
    ctl = AssetListController(repo)
    ctl.start()
    await ctl.settled()
    snap = ctl.snapshot
    assert snap.status == "error"
    assert snap.rows == ()
    assert snap.total == 0


@pytest.mark.asyncio
async def test_page_past_the_end_is_clamped():
    repo = ScriptedRepo(lambda p: _page(*(["x"] if p.offset < 121 else []), total=121))
    ctl = AssetListController(repo, page=4)
    ctl.start()
    await ctl.settled()

    snap = ctl.snapshot
    assert snap.total_pages == 3
    assert snap.page == 3
    assert snap.params.offset == 96
    assert all(p.offset >= 0 for p in repo.calls)

    assert ctl.set_page(4) is None
    assert ctl.snapshot.page == 3
    ctl.set_page(0)
    await ctl.settled()
    assert ctl.snapshot.page == 1
    assert repo.calls[-1].offset == 0


@pytest.mark.asyncio
async def test_closed_controller_ignores_late_response():
    repo = GatedRepo()
    ctl = AssetListController(repo)
    ctl.start()
    await drain()
    ctl.close()
    repo.calls[0][1].set_result(_page("late"))
    await drain()
    assert ctl.snapshot.rows == ()
    assert ctl.snapshot.status == "loading"
    with pytest.raises(RuntimeError):
        ctl.refetch()


@pytest.mark.asyncio
async def test_count_failure_surfaces_rows_with_unknown_total(store):
    store.rpc_handlers["list_assets"] = lambda p: [asset_row("a1")]

    def count(_p):
        raise RemoteQueryError("count timed out")

    store.rpc_handlers["count_assets"] = count
    ctl = AssetListController(AssetRepository(store))
    ctl.start()
    await ctl.settled()
    snap = ctl.snapshot
    assert snap.status == "success"
    assert [a.id for a in snap.rows] == ["a1"]
    assert snap.total == 0
    assert snap.count_error == "count timed out"
