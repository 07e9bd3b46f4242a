"""
slambase_admin.auth.session

Session resolution and cookie transport.

Responsibilities:
- Read the session credential from request cookies.
- Resolve a credential into an `Identity`, refreshing expired access tokens.
- Write rotated credentials back onto responses (and clear them on logout).
"""

from __future__ import annotations

from collections.abc import Mapping

from starlette.responses import Response

from slambase_admin.auth.jwt import (
    JwtConfig,
    JwtExpiredError,
    JwtValidationError,
    decode_and_validate,
)
from slambase_admin.auth.models import Identity, SessionCredential, SessionResult
from slambase_admin.observability.logging import get_logger
from slambase_admin.platform.auth_api import AuthApiClient, AuthApiError
from slambase_admin.settings import Settings

log = get_logger(__name__)


def access_cookie(settings: Settings) -> str:
    return f"{settings.cookie_prefix}-access-token"


def refresh_cookie(settings: Settings) -> str:
    return f"{settings.cookie_prefix}-refresh-token"


def credential_from_cookies(
    cookies: Mapping[str, str], settings: Settings
) -> SessionCredential | None:
    access = cookies.get(access_cookie(settings)) or ""
    refresh = cookies.get(refresh_cookie(settings)) or None
    if not access and not refresh:
        return None
    return SessionCredential(access_token=access, refresh_token=refresh)


def write_credential(response: Response, credential: SessionCredential, settings: Settings) -> None:
    opts = {"httponly": True, "samesite": "lax", "secure": settings.cookie_secure, "path": "/"}
    response.set_cookie(access_cookie(settings), credential.access_token, **opts)
    if credential.refresh_token:
        response.set_cookie(refresh_cookie(settings), credential.refresh_token, **opts)


def clear_credential(response: Response, settings: Settings) -> None:
    response.delete_cookie(access_cookie(settings), path="/")
    response.delete_cookie(refresh_cookie(settings), path="/")


class SessionResolver:
    """
    Turns a cookie credential into an identity.

    Never raises for bad, expired or unverifiable credentials: those come back
    as `SessionResult(identity=None, error=...)`, which callers treat exactly
    like an anonymous request.
    """

    def __init__(self, *, settings: Settings, auth_api: AuthApiClient) -> None:
        self._settings = settings
        self._auth_api = auth_api
        self._jwt = JwtConfig(
            alg=settings.jwt_alg,
            audience=settings.jwt_audience,
            secret=settings.jwt_secret,
        )

    async def resolve(self, credential: SessionCredential | None) -> SessionResult:
        if credential is None:
            return SessionResult()
        if not credential.access_token:
            return await self._refresh(credential)

        try:
            claims = decode_and_validate(cfg=self._jwt, token=credential.access_token)
        except JwtExpiredError:
            return await self._refresh(credential)
        except JwtValidationError as e:
            return SessionResult(error=f"invalid access token: {e}")

        if self._settings.verify_session_remotely:
            # Catches server-side revocation that a signature check cannot see.
            try:
                identity = await self._auth_api.get_user(access_token=credential.access_token)
            except AuthApiError as e:
                return SessionResult(error=e.message)
            return SessionResult(identity=identity)

        return SessionResult(identity=Identity(id=str(claims["sub"]), email=claims.get("email")))

    async def _refresh(self, credential: SessionCredential) -> SessionResult:
        if not credential.refresh_token:
            return SessionResult(error="access token expired")
        try:
            session = await self._auth_api.refresh(refresh_token=credential.refresh_token)
        except AuthApiError as e:
            return SessionResult(error=f"refresh failed: {e.message}")
        log.info("session_refreshed", user_id=session.identity.id)
        return SessionResult(identity=session.identity, refreshed=session.credential)


# --- Module Notes -----------------------------------------------------------
# The cookie pair mirrors what the platform's browser SDK stores; the admin UI and
# this service therefore share a session without a second login.
