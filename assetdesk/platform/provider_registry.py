import httpx
from assetdesk.core.config import settings
from assetdesk.platform.ports.query_store import QueryStorePort
from assetdesk.platform.adapters.store_postgrest import PostgrestQueryStore
from assetdesk.platform.ports.object_storage import ObjectStoragePort
from assetdesk.platform.adapters.storage_public import PublicBucketStorage
from assetdesk.platform.adapters.storage_s3 import S3Storage

class ProviderRegistry:
    _http: httpx.AsyncClient | None = None
    _object_storage: ObjectStoragePort | None = None
    _anon_store: PostgrestQueryStore | None = None

    @classmethod
    def http_client(cls) -> httpx.AsyncClient:
        if cls._http is None or cls._http.is_closed:
            cls._http = httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS)
        return cls._http

    @classmethod
    def query_store(cls, access_token: str | None = None) -> QueryStorePort:
        # one pooled client; the bearer token is per caller so row-level security applies
        client = cls.http_client()
        if cls._anon_store is None or cls._anon_store.client is not client:
            cls._anon_store = PostgrestQueryStore(client, settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY)
        if access_token is None:
            return cls._anon_store
        return cls._anon_store.with_token(access_token)

    @classmethod
    def object_storage(cls) -> ObjectStoragePort:
        if cls._object_storage is None:
            if settings.THUMBNAIL_STORAGE_PROVIDER == "s3":
                cls._object_storage = S3Storage()
            else:
                cls._object_storage = PublicBucketStorage(settings.THUMBNAIL_PUBLIC_BASE_URL)
        return cls._object_storage

    @classmethod
    async def aclose(cls) -> None:
        if cls._http is not None:
            await cls._http.aclose()
            cls._http = None
        cls._anon_store = None

registry = ProviderRegistry()
