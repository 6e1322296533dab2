from pydantic import ValidationError
from assetdesk.core.errors import RemoteQueryError
from assetdesk.platform.ports.query_store import QueryStorePort
from assetdesk.modules.identity.schemas import UserProfile

class ProfileRepository:
    def __init__(self, store: QueryStorePort):
        self.store = store

    async def get(self, user_id: str) -> UserProfile | None:
        rows = await self.store.select("user_profiles", "id, email, role, created_at", eq={"id": user_id}, limit=1)
        if not rows:
            return None
        try:
            return UserProfile.model_validate(rows[0])
        except ValidationError as e:
            raise RemoteQueryError(f"Malformed profile for {user_id}") from e
