from fastapi import APIRouter, Depends
from assetdesk.core.security import get_session_context
from assetdesk.modules.identity.schemas import MeOut
from assetdesk.modules.identity.service import SessionContext

router = APIRouter()

@router.get("/me", response_model=MeOut)
async def me(ctx: SessionContext = Depends(get_session_context)):
    return MeOut(profile=ctx.profile, is_admin=ctx.is_admin, navigation=ctx.navigation())
