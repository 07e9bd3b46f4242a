"""
slambase_admin.platform.storage

HTTP client for the platform object storage API (`/storage/v1/*`).

Responsibilities:
- Upload objects and compute their public URLs.
- Remove objects (best-effort callers decide how to treat failures).
- Map a public URL back to its in-bucket path.
"""

from __future__ import annotations

import httpx

from slambase_admin.platform.http import PlatformError, send
from slambase_admin.settings import Settings


class StorageError(PlatformError):
    pass


class StorageClient:
    def __init__(self, *, settings: Settings, http: httpx.AsyncClient) -> None:
        self._settings = settings
        self._http = http

    def _authz(self) -> dict[str, str]:
        # Writes use the service key; buckets are public-read only.
        return {"Authorization": f"Bearer {self._settings.platform_service_key}"}

    def public_url(self, bucket: str, path: str) -> str:
        base = self._settings.platform_url.rstrip("/")
        return f"{base}/storage/v1/object/public/{bucket}/{path}"

    def path_from_public_url(self, bucket: str, url: str) -> str | None:
        # Everything after the bucket segment is the object path.
        parts = url.split("/")
        if bucket not in parts:
            return None
        idx = parts.index(bucket)
        path = "/".join(parts[idx + 1 :])
        return path or None

    async def put(self, bucket: str, path: str, data: bytes, *, content_type: str) -> str:
        await send(
            self._http,
            "POST",
            f"/storage/v1/object/{bucket}/{path}",
            content=data,
            headers={
                **self._authz(),
                "Content-Type": content_type,
                "Cache-Control": "max-age=3600",
                "x-upsert": "false",
            },
            error_cls=StorageError,
        )
        return self.public_url(bucket, path)

    async def remove(self, bucket: str, paths: list[str]) -> None:
        await send(
            self._http,
            "DELETE",
            f"/storage/v1/object/{bucket}",
            json={"prefixes": paths},
            headers=self._authz(),
            error_cls=StorageError,
        )
