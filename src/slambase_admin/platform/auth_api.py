"""
slambase_admin.platform.auth_api

HTTP client for the platform identity API (`/auth/v1/*`).

Responsibilities:
- Exchange email/password or a refresh token for a session.
- Look up the user behind an access token.
- Revoke a session on sign-out.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx

from slambase_admin.auth.models import Identity, SessionCredential
from slambase_admin.platform.http import PlatformError, send
from slambase_admin.settings import Settings


class AuthApiError(PlatformError):
    pass


@dataclass(frozen=True, slots=True)
class PlatformSession:
    credential: SessionCredential
    identity: Identity


def _identity(user: dict[str, Any]) -> Identity:
    if not user.get("id"):
        raise AuthApiError(None, "malformed user payload")
    return Identity(id=str(user["id"]), email=user.get("email"))


def _session(body: dict[str, Any]) -> PlatformSession:
    try:
        credential = SessionCredential(
            access_token=str(body["access_token"]),
            refresh_token=str(body["refresh_token"]),
        )
    except KeyError as e:
        raise AuthApiError(None, f"malformed session payload: missing {e}") from e
    return PlatformSession(credential=credential, identity=_identity(body.get("user") or {}))


class AuthApiClient:
    def __init__(self, *, settings: Settings, http: httpx.AsyncClient) -> None:
        self._settings = settings
        self._http = http

    async def sign_in_with_password(self, *, email: str, password: str) -> PlatformSession:
        r = await send(
            self._http,
            "POST",
            "/auth/v1/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
            error_cls=AuthApiError,
        )
        return _session(r.json())

    async def refresh(self, *, refresh_token: str) -> PlatformSession:
        # Refresh tokens are single-use: the returned pair replaces the old one.
        r = await send(
            self._http,
            "POST",
            "/auth/v1/token",
            params={"grant_type": "refresh_token"},
            json={"refresh_token": refresh_token},
            error_cls=AuthApiError,
        )
        return _session(r.json())

    async def get_user(self, *, access_token: str) -> Identity:
        r = await send(
            self._http,
            "GET",
            "/auth/v1/user",
            headers={"Authorization": f"Bearer {access_token}"},
            error_cls=AuthApiError,
        )
        return _identity(r.json())

    async def sign_out(self, *, access_token: str) -> None:
        await send(
            self._http,
            "POST",
            "/auth/v1/logout",
            headers={"Authorization": f"Bearer {access_token}"},
            error_cls=AuthApiError,
        )


# --- Module Notes -----------------------------------------------------------
# Requests carry the anon `apikey` header from `platform.http.create_platform_http`;
# user-scoped calls add the user's bearer token.
