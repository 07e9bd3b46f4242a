"""
slambase_admin.platform.http

Shared HTTP plumbing for platform clients.

Responsibilities:
- Build the process-wide `httpx.AsyncClient` pointed at the platform.
- Send requests and normalize failures into `PlatformError`.
"""

from __future__ import annotations

from typing import Any

import httpx

from slambase_admin.settings import Settings


class PlatformError(Exception):
    """
    Non-2xx response or transport failure from a platform API.
    `status_code` is None when no response was received.
    """

    def __init__(self, status_code: int | None, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def create_platform_http(
    settings: Settings, *, transport: httpx.AsyncBaseTransport | None = None
) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        base_url=settings.platform_url.rstrip("/"),
        headers={"apikey": settings.platform_anon_key},
        timeout=settings.http_timeout_seconds,
        transport=transport,
    )


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        for key in ("error_description", "msg", "message", "error"):
            if body.get(key):
                return str(body[key])
    return response.reason_phrase


async def send(
    http: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    error_cls: type[PlatformError] = PlatformError,
    **kwargs: Any,
) -> httpx.Response:
    try:
        r = await http.request(method, url, **kwargs)
    except httpx.HTTPError as e:
        raise error_cls(None, f"platform unreachable: {e}") from e
    if r.is_error:
        raise error_cls(r.status_code, _error_message(r))
    return r
