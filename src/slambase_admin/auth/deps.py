"""
slambase_admin.auth.deps

Page-level admin guard (second enforcement point) and its FastAPI dependency.

Responsibilities:
- Re-derive the gate decision inside the route, after the middleware ran.
- Expose the admin record to screens for the page chrome.
- Turn denials into `GuardRedirect`, rendered as a 303 by the app.
"""

from __future__ import annotations

import enum
from collections.abc import AsyncIterator

from fastapi import Request

from slambase_admin.auth.gate import MSG_ADMIN_REQUIRED, AdminGate, Outcome, login_url
from slambase_admin.auth.models import AdminRecord, SessionCredential
from slambase_admin.auth.session import credential_from_cookies
from slambase_admin.observability.logging import get_logger

log = get_logger(__name__)


class GuardState(enum.StrEnum):
    pending = "PENDING"
    allowed = "ALLOWED"
    redirecting = "REDIRECTING"


class GuardRedirect(Exception):
    def __init__(self, location: str) -> None:
        super().__init__(location)
        self.location = location


class PageGuard:
    """
    Advisory re-check of the gate decision for a single screen render.

    Starts `pending`; `run()` moves it to `allowed` (with `admin` set) or
    `redirecting` (with `redirect_to` set). After `close()` any late result
    is dropped and the guard stays where it was.
    """

    def __init__(
        self, *, gate: AdminGate, path: str, credential: SessionCredential | None
    ) -> None:
        self._gate = gate
        self._path = path
        self._credential = credential
        self._closed = False
        self.state = GuardState.pending
        self.admin: AdminRecord | None = None
        self.redirect_to: str | None = None

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        self._closed = True

    async def run(self) -> GuardState:
        if self.state is not GuardState.pending:
            return self.state

        # Identity first, then the admin lookup; sequenced inside evaluate().
        result = await self._gate.evaluate(self._path, self._credential)
        if self._closed:
            return self.state

        if result.decision.outcome is Outcome.redirect:
            self.redirect_to = result.decision.location
            self.state = GuardState.redirecting
        else:
            self.admin = result.admin
            self.state = GuardState.allowed
        return self.state


def _credential(request: Request) -> SessionCredential | None:
    refreshed = getattr(request.state, "refreshed_credential", None)
    if refreshed is not None:
        return refreshed
    return credential_from_cookies(request.cookies, request.app.state.settings)


async def require_admin(request: Request) -> AsyncIterator[AdminRecord]:
    guard = PageGuard(
        gate=request.app.state.gate,
        path=request.url.path,
        credential=_credential(request),
    )
    try:
        state = await guard.run()
        if state is GuardState.redirecting:
            log.warning("page_guard_redirect", location=guard.redirect_to)
            raise GuardRedirect(guard.redirect_to or login_url(MSG_ADMIN_REQUIRED))
        if guard.admin is None:
            # Only reachable on a screen outside the protected prefix.
            raise GuardRedirect(login_url(MSG_ADMIN_REQUIRED))
        yield guard.admin
    finally:
        guard.close()


# --- Module Notes -----------------------------------------------------------
# The middleware is the authoritative check; this dependency exists for deployments
# where edge interception is skipped (cached shells, mounted sub-apps).
