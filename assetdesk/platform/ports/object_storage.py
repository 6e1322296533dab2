from typing import Protocol, runtime_checkable

@runtime_checkable
class ObjectStoragePort(Protocol):
    def presign_download(self, key: str, expires_seconds: int = 900) -> str: ...
