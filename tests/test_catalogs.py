import asyncio

import pytest
from conftest import drain
from pydantic import ValidationError

from assetdesk.core.errors import RemoteQueryError
from assetdesk.modules.catalogs.loaders import CharactersLoader, PropertiesLoader
from assetdesk.modules.catalogs.repository import CatalogRepository
from assetdesk.modules.catalogs.schemas import (
    CharacterCreate,
    CharacterUpdate,
    PropertyCreate,
    split_aliases,
)


@pytest.fixture
def catalog_store(store):
    store.tables["properties"] = [
        {"id": "P2", "name": "Marvel", "studio": "Disney", "created_at": None},
        {"id": "P1", "name": "DC", "studio": None, "created_at": None},
    ]
    store.tables["characters"] = [
        {"id": "C1", "name": "Batman", "aliases": ["Bats"], "property_id": "P1"},
        {"id": "C2", "name": "Iron Man", "aliases": None, "property_id": "P2"},
        {"id": "C3", "name": "Alfred", "aliases": [], "property_id": "P1"},
    ]
    return store


def test_split_aliases():
    assert split_aliases("Bats, the Bat ,,") == ["Bats", "the Bat"]
    assert split_aliases("") == []
    assert split_aliases(None) == []


def test_property_create_normalizes_blank_studio():
    assert PropertyCreate(name="  DC ", studio="  ").model_dump() == {"name": "DC", "studio": None}
    with pytest.raises(ValidationError):
        PropertyCreate(name="   ")


def test_character_payloads_accept_comma_separated_aliases():
    c = CharacterCreate(name="Batman", aliases="Bats, Dark Knight", property_id="P1")
    assert c.aliases == ["Bats", "Dark Knight"]
    u = CharacterUpdate(name="Batman", aliases=[" Bats ", ""])
    assert u.aliases == ["Bats"]
    with pytest.raises(ValidationError):
        CharacterCreate(name="Batman", property_id="")


@pytest.mark.asyncio
async def test_list_properties_ordered_by_name(catalog_store):
    props = await CatalogRepository(catalog_store).list_properties()
    assert [p.name for p in props] == ["DC", "Marvel"]
    assert props[0].studio == ""


@pytest.mark.asyncio
async def test_list_characters_scoped_to_property(catalog_store):
    repo = CatalogRepository(catalog_store)
    scoped = await repo.list_characters("P1")
    assert [c.name for c in scoped] == ["Alfred", "Batman"]
    everyone = await repo.list_characters(None)
    assert len(everyone) == 3
    assert next(c for c in everyone if c.id == "C2").aliases == []
    selects = [c for c in catalog_store.calls if c[0] == "select"]
    assert selects[0][2]["eq"] == {"property_id": "P1"}
    assert selects[1][2]["eq"] is None


@pytest.mark.asyncio
async def test_create_and_update_character(catalog_store):
    repo = CatalogRepository(catalog_store)
    created = await repo.create_character(CharacterCreate(name="Robin", aliases="Boy Wonder", property_id="P1"))
    assert created.name == "Robin"
    assert created.aliases == ["Boy Wonder"]
    assert catalog_store.calls[-1] == (
        "insert", "characters", {"name": "Robin", "aliases": ["Boy Wonder"], "property_id": "P1"},
    )

    updated = await repo.update_character("C1", CharacterUpdate(name="The Batman", aliases=""))
    assert updated.name == "The Batman"
    assert updated.aliases == []
    assert catalog_store.calls[-1][3] == {"id": "C1"}
    assert await repo.update_character("missing", CharacterUpdate(name="x")) is None


@pytest.mark.asyncio
async def test_update_property(catalog_store):
    repo = CatalogRepository(catalog_store)
    updated = await repo.update_property("P1", PropertyCreate(name="DC Comics", studio="Warner"))
    assert updated.studio == "Warner"


@pytest.mark.asyncio
async def test_properties_loader_mounts_once(catalog_store):
    loader = PropertiesLoader(CatalogRepository(catalog_store))
    assert loader.snapshot.loading is True
    loader.mount()
    loader.mount()
    await loader.settled()
    assert [p.id for p in loader.snapshot.items] == ["P1", "P2"]
    assert loader.snapshot.loading is False
    assert len([c for c in catalog_store.calls if c[0] == "select"]) == 1


@pytest.mark.asyncio
async def test_characters_loader_refetches_on_property_change(catalog_store):
    loader = CharactersLoader(CatalogRepository(catalog_store))
    loader.mount("P1")
    await loader.settled()
    assert {c.id for c in loader.items} == {"C1", "C3"}

    assert loader.set_property("P1") is loader._task
    loader.set_property("P2")
    await loader.settled()
    assert [c.id for c in loader.items] == ["C2"]

    loader.set_property(None)
    await loader.settled()
    assert len(loader.items) == 3
    assert len([c for c in catalog_store.calls if c[0] == "select"]) == 3


class GatedCatalogStore:
    """Character selects wait until the test releases them, keyed by property."""

    def __init__(self):
        self.pending = {}

    async def select(self, table, columns, *, eq=None, order=None, ascending=True, limit=None):
        fut = asyncio.get_running_loop().create_future()
        self.pending[(eq or {}).get("property_id")] = fut
        return await fut


@pytest.mark.asyncio
async def test_characters_loader_latest_property_wins():
    store = GatedCatalogStore()
    loader = CharactersLoader(CatalogRepository(store))
    loader.mount("P1")
    await drain()
    loader.set_property("P2")
    await drain()

    store.pending["P2"].set_result([{"id": "C2", "name": "Iron Man", "property_id": "P2"}])
    await drain()
    store.pending["P1"].set_result([{"id": "C1", "name": "Batman", "property_id": "P1"}])
    await drain()

    assert loader.property_id == "P2"
    assert [c.id for c in loader.items] == ["C2"]
    assert loader.loading is False


@pytest.mark.asyncio
async def test_loader_settles_when_store_crashes():
    class BrokenStore:
        async def select(self, *args, **kwargs):
            raise ValueError("Expecting value: line 1 column 1 (char 0)")

    seen = []
    loader = PropertiesLoader(CatalogRepository(BrokenStore()))
    loader.subscribe(lambda state: seen.append(state.loading))
    loader.mount()
    await loader.settled()
    assert loader.loading is False
    assert loader.items == ()
    assert seen == [True, False]


@pytest.mark.asyncio
async def test_loader_failure_degrades_to_empty(store):
    store.table_errors["properties"] = RemoteQueryError("permission denied")
    loader = PropertiesLoader(CatalogRepository(store))
    loader.mount()
    await loader.settled()
    assert loader.items == ()
    assert loader.loading is False
