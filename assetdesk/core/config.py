from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
from typing import Literal

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    APP_NAME: str = "assetdesk"
    ENV: Literal["local", "dev", "prod"] = "local"
    API_PREFIX: str = "/api/v1"

    # Backend-as-a-service (PostgREST rows + RPC)
    SUPABASE_URL: str = "http://localhost:54321"
    SUPABASE_ANON_KEY: str = "dev-anon-key"
    HTTP_TIMEOUT_SECONDS: float = 15.0

    # Auth: access tokens are HS256 JWTs signed with the project secret
    JWT_ALG: str = "HS256"
    JWT_SECRET: str = "dev-secret-change-me"
    REQUIRED_AUDIENCE: str | None = "authenticated"

    # Thumbnails
    THUMBNAIL_STORAGE_PROVIDER: Literal["public", "s3"] = "public"
    THUMBNAIL_PUBLIC_BASE_URL: str | None = None  # e.g. https://bucket.nyc3.cdn.digitaloceanspaces.com
    THUMBNAIL_URL_TTL_SECONDS: int = 900

    # S3-compatible (Spaces/MinIO)
    S3_ENDPOINT_URL: str | None = None
    S3_REGION: str = "us-east-1"
    S3_BUCKET: str = "assetdesk-thumbnails"
    S3_ACCESS_KEY: str | None = None
    S3_SECRET_KEY: str | None = None
    S3_THUMBNAIL_PREFIX: str = ""

    @field_validator("SUPABASE_URL")
    @classmethod
    def _must_http(cls, v: str):
        if not v.startswith(("http://", "https://")):
            raise ValueError("SUPABASE_URL must be an http(s) URL")
        return v.rstrip("/")

settings = Settings()
