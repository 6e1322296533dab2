import logging
from typing import Callable
from jose import jwt, JWTError
from assetdesk.core.config import settings
from assetdesk.platform.ports.query_store import QueryStorePort
from assetdesk.modules.identity.navigation import navigation
from assetdesk.modules.identity.repository import ProfileRepository
from assetdesk.modules.identity.schemas import NavItem, UserProfile

logger = logging.getLogger(__name__)

class InvalidSession(Exception):
    pass

def decode_access_token(token: str) -> dict:
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALG], audience=settings.REQUIRED_AUDIENCE)
    except JWTError as e:
        raise InvalidSession(f"Invalid token: {e}") from e

class SessionContext:
    """The signed-in user, handed to whatever needs it.

    Opened once with an access token (loads the profile), closed on sign-out.
    Nothing else reads auth state.
    """

    def __init__(self, store_for: Callable[[str | None], QueryStorePort]):
        self._store_for = store_for
        self._access_token: str | None = None
        self._profile: UserProfile | None = None
        self._store: QueryStorePort | None = None

    @property
    def profile(self) -> UserProfile | None:
        return self._profile

    @property
    def access_token(self) -> str | None:
        return self._access_token

    @property
    def is_open(self) -> bool:
        return self._profile is not None

    @property
    def role(self) -> str | None:
        return self._profile.role if self._profile else None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    @property
    def store(self) -> QueryStorePort:
        """Store acting as the signed-in user (anonymous before ``open``)."""
        if self._store is None:
            self._store = self._store_for(self._access_token)
        return self._store

    def navigation(self) -> list[NavItem]:
        return navigation(self.role)

    async def open(self, access_token: str) -> UserProfile | None:
        claims = decode_access_token(access_token)
        user_id = claims.get("sub")
        if not user_id:
            raise InvalidSession("Token has no subject")
        self._access_token = access_token
        self._store = self._store_for(access_token)
        self._profile = await ProfileRepository(self._store).get(str(user_id))
        if self._profile is None:
            logger.warning(f"No profile row for user {user_id}")
        return self._profile

    def open_local(self, profile: UserProfile) -> None:
        """Local development without an auth provider."""
        self._access_token = None
        self._store = self._store_for(None)
        self._profile = profile

    def close(self) -> None:
        self._access_token = None
        self._profile = None
        self._store = None
