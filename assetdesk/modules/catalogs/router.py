from fastapi import APIRouter, Depends, HTTPException
from assetdesk.core.security import get_session_context, require_role
from assetdesk.modules.identity.service import SessionContext
from assetdesk.modules.catalogs.repository import CatalogRepository
from assetdesk.modules.catalogs.schemas import (
    Character, CharacterCreate, CharacterUpdate, Property, PropertyCreate, PropertyUpdate,
)

router = APIRouter()

def catalogs(ctx: SessionContext = Depends(get_session_context)) -> CatalogRepository:
    return CatalogRepository(ctx.store)

@router.get("/properties", response_model=list[Property])
async def list_properties(repo: CatalogRepository = Depends(catalogs)):
    return await repo.list_properties()

@router.post("/properties", response_model=Property, status_code=201, dependencies=[Depends(require_role("admin"))])
async def create_property(payload: PropertyCreate, repo: CatalogRepository = Depends(catalogs)):
    obj = await repo.create_property(payload)
    if not obj:
        raise HTTPException(status_code=502, detail="Property was not returned by the store")
    return obj

@router.patch("/properties/{property_id}", response_model=Property, dependencies=[Depends(require_role("admin"))])
async def update_property(property_id: str, payload: PropertyUpdate, repo: CatalogRepository = Depends(catalogs)):
    obj = await repo.update_property(property_id, payload)
    if not obj:
        raise HTTPException(status_code=404, detail="Property not found")
    return obj

@router.get("/characters", response_model=list[Character])
async def list_characters(property_id: str | None = None, repo: CatalogRepository = Depends(catalogs)):
    return await repo.list_characters(property_id)

@router.post("/characters", response_model=Character, status_code=201, dependencies=[Depends(require_role("admin"))])
async def create_character(payload: CharacterCreate, repo: CatalogRepository = Depends(catalogs)):
    obj = await repo.create_character(payload)
    if not obj:
        raise HTTPException(status_code=502, detail="Character was not returned by the store")
    return obj

@router.patch("/characters/{character_id}", response_model=Character, dependencies=[Depends(require_role("admin"))])
async def update_character(character_id: str, payload: CharacterUpdate, repo: CatalogRepository = Depends(catalogs)):
    obj = await repo.update_character(character_id, payload)
    if not obj:
        raise HTTPException(status_code=404, detail="Character not found")
    return obj
