from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from assetdesk.core.config import settings
from assetdesk.platform.provider_registry import registry
from assetdesk.modules.identity.schemas import UserProfile
from assetdesk.modules.identity.service import InvalidSession, SessionContext

http_bearer = HTTPBearer(auto_error=False)

LOCAL_PROFILE = UserProfile(id="00000000-0000-0000-0000-000000000001", email="dev@localhost", role="admin")

async def get_session_context(creds: HTTPAuthorizationCredentials | None = Depends(http_bearer)):
    ctx = SessionContext(registry.query_store)
    # In local, allow missing token and act as a local admin
    if creds is None and settings.ENV == "local":
        ctx.open_local(LOCAL_PROFILE)
    elif creds is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing token")
    else:
        try:
            profile = await ctx.open(creds.credentials)
        except InvalidSession as e:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
        if profile is None:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Profile not found")
    try:
        yield ctx
    finally:
        ctx.close()

def require_role(*roles: str):
    def dep(ctx: SessionContext = Depends(get_session_context)) -> SessionContext:
        if ctx.role not in roles:
            raise HTTPException(status_code=403, detail="Insufficient role")
        return ctx
    return dep
