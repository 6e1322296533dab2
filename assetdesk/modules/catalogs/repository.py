from pydantic import ValidationError
from assetdesk.core.errors import RemoteQueryError
from assetdesk.platform.ports.query_store import QueryStorePort
from assetdesk.modules.catalogs.schemas import (
    Character, CharacterCreate, CharacterUpdate, Property, PropertyCreate, PropertyUpdate,
)

PROPERTY_COLUMNS = "id, name, studio, created_at"
CHARACTER_COLUMNS = "id, name, aliases, property_id, created_at"

def _rows(model, data: list[dict]) -> list:
    try:
        return [model.model_validate(r) for r in data or []]
    except ValidationError as e:
        raise RemoteQueryError(f"Malformed {model.__name__.lower()} row: {e.error_count()} invalid field(s)") from e

def _first(model, data: list[dict]):
    rows = _rows(model, data)
    return rows[0] if rows else None

class CatalogRepository:
    def __init__(self, store: QueryStorePort): self.store = store

    async def list_properties(self) -> list[Property]:
        return _rows(Property, await self.store.select("properties", PROPERTY_COLUMNS, order="name"))

    async def list_characters(self, property_id: str | None = None) -> list[Character]:
        eq = {"property_id": property_id} if property_id else None
        return _rows(Character, await self.store.select("characters", CHARACTER_COLUMNS, eq=eq, order="name"))

    async def create_property(self, payload: PropertyCreate) -> Property | None:
        return _first(Property, await self.store.insert("properties", payload.model_dump()))

    async def update_property(self, property_id: str, payload: PropertyUpdate) -> Property | None:
        return _first(Property, await self.store.update("properties", payload.model_dump(), eq={"id": property_id}))

    async def create_character(self, payload: CharacterCreate) -> Character | None:
        return _first(Character, await self.store.insert("characters", payload.model_dump()))

    async def update_character(self, character_id: str, payload: CharacterUpdate) -> Character | None:
        return _first(Character, await self.store.update("characters", payload.model_dump(), eq={"id": character_id}))
