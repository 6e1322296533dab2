import boto3
from botocore.client import Config
from assetdesk.platform.ports.object_storage import ObjectStoragePort
from assetdesk.core.config import settings

class S3Storage(ObjectStoragePort):
    """Private thumbnail bucket; every download URL is presigned and short lived."""

    def __init__(self, bucket: str | None = None, key_prefix: str | None = None, client=None):
        if client is None:
            session = boto3.session.Session(
                aws_access_key_id=settings.S3_ACCESS_KEY,
                aws_secret_access_key=settings.S3_SECRET_KEY,
                region_name=settings.S3_REGION,
            )
            client = session.client(
                "s3",
                endpoint_url=settings.S3_ENDPOINT_URL,
                config=Config(signature_version="s3v4"),
            )
        self.s3 = client
        self.bucket = bucket or settings.S3_BUCKET
        self.key_prefix = (settings.S3_THUMBNAIL_PREFIX if key_prefix is None else key_prefix).strip("/")

    def object_key(self, key: str) -> str:
        key = key.lstrip("/")
        if not self.key_prefix or key.startswith(self.key_prefix + "/"):
            return key
        return f"{self.key_prefix}/{key}"

    def presign_download(self, key: str, expires_seconds: int = 900) -> str:
        return self.s3.generate_presigned_url(
            "get_object",
            Params={
                "Bucket": self.bucket,
                "Key": self.object_key(key),
                # a key is never rewritten
                "ResponseCacheControl": f"private, max-age={expires_seconds}",
            },
            ExpiresIn=expires_seconds,
        )
