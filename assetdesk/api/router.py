from fastapi import APIRouter
from assetdesk.modules.assets.router import router as assets_router
from assetdesk.modules.catalogs.router import router as catalogs_router
from assetdesk.modules.identity.router import router as identity_router

api_router = APIRouter()
api_router.include_router(assets_router, prefix="/assets", tags=["assets"])
api_router.include_router(catalogs_router, tags=["catalogs"])
api_router.include_router(identity_router, tags=["identity"])

@api_router.get("/health", tags=["health"])
async def health():
    return {"status": "ok"}
