"""
slambase_admin.auth.middleware

Request interception for `/admin/*`.

Responsibilities:
- Run the admin gate before any route code on protected paths.
- Redirect or pass through according to the gate decision.
- Write rotated session cookies onto every protected response.
"""

from __future__ import annotations

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import RedirectResponse, Response
from starlette.status import HTTP_303_SEE_OTHER

from slambase_admin.auth.gate import AdminGate, Outcome, is_protected
from slambase_admin.auth.session import access_cookie, credential_from_cookies, write_credential
from slambase_admin.observability.logging import get_logger
from slambase_admin.settings import Settings

log = get_logger(__name__)


class AdminGateMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        path = request.url.path
        if not is_protected(path):
            return await call_next(request)

        settings: Settings = request.app.state.settings
        gate: AdminGate = request.app.state.gate
        result = await gate.evaluate(path, credential_from_cookies(request.cookies, settings))

        if result.refreshed is not None:
            # Lets the page guard reuse the rotated pair instead of redeeming the
            # (single-use) refresh token a second time.
            request.state.refreshed_credential = result.refreshed

        if result.decision.outcome is Outcome.redirect:
            log.info(
                "gate_redirect",
                location=result.decision.location,
                reason=result.decision.message,
            )
            response: Response = RedirectResponse(
                result.decision.location, status_code=HTTP_303_SEE_OTHER
            )
        else:
            if result.admin is not None:
                structlog.contextvars.bind_contextvars(
                    admin_id=result.admin.id, admin_role=result.admin.role.value
                )
            log.info("gate_allow")
            response = await call_next(request)

        if result.refreshed is not None and not _sets_session(response, settings):
            write_credential(response, result.refreshed, settings)
        return response


def _sets_session(response: Response, settings: Settings) -> bool:
    # Login/logout write their own cookies; a rotated old session must not win.
    prefix = access_cookie(settings) + "="
    return any(v.startswith(prefix) for v in response.headers.getlist("set-cookie"))
