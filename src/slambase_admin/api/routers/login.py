"""
slambase_admin.api.routers.login

Login screen, sign-in and sign-out.

Responsibilities:
- Render the login screen payload (including the gate's redirect message).
- Exchange credentials for a platform session and set the session cookies,
  for admins only.
- Revoke the platform session and clear cookies on logout.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.responses import RedirectResponse
from starlette.status import (
    HTTP_303_SEE_OTHER,
    HTTP_401_UNAUTHORIZED,
    HTTP_403_FORBIDDEN,
    HTTP_502_BAD_GATEWAY,
)

from slambase_admin.api.deps import auth_api_dep, db_session, settings_dep
from slambase_admin.auth.gate import DASHBOARD_PATH, LOGIN_PATH, MSG_ADMIN_REQUIRED
from slambase_admin.auth.session import clear_credential, credential_from_cookies, write_credential
from slambase_admin.db.repositories.admin_users import AdminUserRepo
from slambase_admin.observability.logging import get_logger
from slambase_admin.platform.auth_api import AuthApiClient, AuthApiError
from slambase_admin.settings import Settings

log = get_logger(__name__)

router = APIRouter(prefix="/admin", tags=["auth"])


class LoginRequest(BaseModel):
    email: str = Field(min_length=3, max_length=320)
    password: str = Field(min_length=1, max_length=1024)


@router.get("/login")
async def login_screen(message: str | None = None) -> dict[str, Any]:
    return {
        "screen": "login",
        "title": "SlamBase",
        "description": "Enter your credentials to access the admin dashboard",
        "notice": {"title": "Access Denied", "description": message} if message else None,
    }


@router.post("/login")
async def login(
    body: LoginRequest,
    settings: Settings = Depends(settings_dep),
    auth_api: AuthApiClient = Depends(auth_api_dep),
    session: AsyncSession = Depends(db_session),
) -> RedirectResponse:
    try:
        platform_session = await auth_api.sign_in_with_password(
            email=body.email, password=body.password
        )
    except AuthApiError as e:
        if e.status_code is not None and e.status_code < 500:
            raise HTTPException(
                status_code=HTTP_401_UNAUTHORIZED, detail="Invalid login credentials"
            ) from e
        log.error("sign_in_unavailable", error=e.message)
        raise HTTPException(
            status_code=HTTP_502_BAD_GATEWAY, detail="Authentication service unavailable"
        ) from e

    identity = platform_session.identity
    admin = await AdminUserRepo(session).get(identity.id)
    if admin is None:
        # Valid platform user without admin membership: don't leave a live session behind.
        await _sign_out_quietly(auth_api, platform_session.credential.access_token)
        log.warning("login_not_admin", user_id=identity.id)
        raise HTTPException(status_code=HTTP_403_FORBIDDEN, detail=MSG_ADMIN_REQUIRED)

    log.info("admin_login", admin_id=admin.id)
    response = RedirectResponse(DASHBOARD_PATH, status_code=HTTP_303_SEE_OTHER)
    write_credential(response, platform_session.credential, settings)
    return response


@router.post("/logout")
async def logout(
    request: Request,
    settings: Settings = Depends(settings_dep),
    auth_api: AuthApiClient = Depends(auth_api_dep),
) -> RedirectResponse:
    credential = getattr(request.state, "refreshed_credential", None) or credential_from_cookies(
        request.cookies, settings
    )
    if credential is not None and credential.access_token:
        await _sign_out_quietly(auth_api, credential.access_token)

    response = RedirectResponse(LOGIN_PATH, status_code=HTTP_303_SEE_OTHER)
    clear_credential(response, settings)
    return response


async def _sign_out_quietly(auth_api: AuthApiClient, access_token: str) -> None:
    try:
        await auth_api.sign_out(access_token=access_token)
    except AuthApiError as e:
        log.warning("sign_out_failed", status_code=e.status_code, error=e.message)
