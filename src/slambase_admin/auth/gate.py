"""
slambase_admin.auth.gate

Admin authorization gate.

Responsibilities:
- Classify paths (public / login / logout / other protected).
- Hold the single pure decision function shared by every enforcement point.
- Evaluate a request: resolve the session, look up the admin record, decide,
  and degrade any failure to a login redirect.
"""

from __future__ import annotations

import asyncio
import enum
from dataclasses import dataclass
from urllib.parse import quote, urlencode

from slambase_admin.auth.admin_lookup import AdminLookup
from slambase_admin.auth.models import AdminRecord, Identity, SessionCredential, SessionResult
from slambase_admin.auth.session import SessionResolver
from slambase_admin.observability.logging import get_logger

log = get_logger(__name__)

ADMIN_PREFIX = "/admin"
LOGIN_PATH = "/admin/login"
LOGOUT_PATH = "/admin/logout"
DASHBOARD_PATH = "/admin/dashboard"

MSG_LOGIN_REQUIRED = "Please login to access admin dashboard"
MSG_ADMIN_REQUIRED = "Admin access required"
MSG_AUTH_ERROR = "Authentication error occurred"


class Outcome(enum.StrEnum):
    passthrough = "PASSTHROUGH"
    allow = "ALLOW"
    redirect = "REDIRECT"


@dataclass(frozen=True, slots=True)
class Decision:
    outcome: Outcome
    location: str | None = None
    message: str | None = None

    @classmethod
    def passthrough(cls) -> Decision:
        return cls(Outcome.passthrough)

    @classmethod
    def allow(cls) -> Decision:
        return cls(Outcome.allow)

    @classmethod
    def to_login(cls, message: str) -> Decision:
        return cls(Outcome.redirect, location=login_url(message), message=message)

    @classmethod
    def to_dashboard(cls) -> Decision:
        return cls(Outcome.redirect, location=DASHBOARD_PATH)


def _normalize(path: str) -> str:
    return path.rstrip("/") or "/"


def is_protected(path: str) -> bool:
    # "/administrator" is a different route, not a child of /admin.
    path = _normalize(path)
    return path == ADMIN_PREFIX or path.startswith(ADMIN_PREFIX + "/")


def is_login(path: str) -> bool:
    return _normalize(path) == LOGIN_PATH


def is_logout(path: str) -> bool:
    return _normalize(path) == LOGOUT_PATH


def login_url(message: str) -> str:
    return f"{LOGIN_PATH}?{urlencode({'message': message}, quote_via=quote)}"


def decide(path: str, identity: Identity | None, admin: AdminRecord | None) -> Decision:
    """
    Pure allow/redirect decision.

    `admin` is only meaningful when `identity` is set; callers look it up
    iff an identity was resolved.
    """

    if not is_protected(path):
        return Decision.passthrough()

    if is_logout(path):
        # Anyone may drop their cookies, including stale or non-admin sessions.
        return Decision.allow()

    if is_login(path):
        # Non-admin identities stay on the login form; admins skip it.
        if identity is not None and admin is not None:
            return Decision.to_dashboard()
        return Decision.allow()

    if identity is None:
        return Decision.to_login(MSG_LOGIN_REQUIRED)
    if admin is None:
        return Decision.to_login(MSG_ADMIN_REQUIRED)
    return Decision.allow()


@dataclass(frozen=True, slots=True)
class GateResult:
    decision: Decision
    identity: Identity | None = None
    admin: AdminRecord | None = None
    # Written back onto the response whatever the decision.
    refreshed: SessionCredential | None = None


class AdminGate:
    def __init__(
        self,
        *,
        resolver: SessionResolver,
        lookup: AdminLookup,
        timeout_seconds: float,
    ) -> None:
        self._resolver = resolver
        self._lookup = lookup
        self._timeout = timeout_seconds

    async def evaluate(self, path: str, credential: SessionCredential | None) -> GateResult:
        if not is_protected(path):
            return GateResult(decision=Decision.passthrough())

        session = SessionResult()
        try:
            session = await self._resolve(credential)
            identity = session.identity
            admin = await self._lookup.find_admin(identity.id) if identity is not None else None
        except Exception:
            log.exception("gate_error", gate_path=path)
            # Redirecting the login form to itself would loop; serve it as for a non-admin.
            if is_login(path) or is_logout(path):
                return GateResult(decision=Decision.allow(), refreshed=session.refreshed)
            return GateResult(
                decision=Decision.to_login(MSG_AUTH_ERROR), refreshed=session.refreshed
            )

        return GateResult(
            decision=decide(path, identity, admin),
            identity=identity,
            admin=admin,
            refreshed=session.refreshed,
        )

    async def _resolve(self, credential: SessionCredential | None) -> SessionResult:
        try:
            return await asyncio.wait_for(self._resolver.resolve(credential), self._timeout)
        except TimeoutError:
            log.warning("session_resolve_timeout", timeout_seconds=self._timeout)
            return SessionResult(error="session resolution timed out")


# --- Module Notes -----------------------------------------------------------
# Both `auth.middleware.AdminGateMiddleware` and `auth.deps.PageGuard` call
# `AdminGate.evaluate`, so the two enforcement points cannot drift apart.
