"""
slambase_admin.api.app

FastAPI app factory for the SlamBase admin service.

Responsibilities:
- Build the FastAPI application and register routers/middleware.
- Create and dispose shared infrastructure (DB engine, platform HTTP client,
  platform clients, admin gate).
- Provide a single composition root where cross-cutting concerns live.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from starlette.responses import RedirectResponse
from starlette.status import HTTP_303_SEE_OTHER

from slambase_admin import __version__
from slambase_admin.api.routers.catalog import router as catalog_router
from slambase_admin.api.routers.dashboard import router as dashboard_router
from slambase_admin.api.routers.health import router as health_router
from slambase_admin.api.routers.login import router as login_router
from slambase_admin.api.routers.wrestlers import router as wrestlers_router
from slambase_admin.auth.admin_lookup import SqlAdminLookup
from slambase_admin.auth.deps import GuardRedirect
from slambase_admin.auth.gate import AdminGate
from slambase_admin.auth.middleware import AdminGateMiddleware
from slambase_admin.auth.session import SessionResolver
from slambase_admin.db.init_db import init_db
from slambase_admin.db.session import create_engine, create_sessionmaker
from slambase_admin.observability.logging import configure_logging, get_logger
from slambase_admin.observability.middleware import RequestContextMiddleware
from slambase_admin.platform.auth_api import AuthApiClient
from slambase_admin.platform.http import create_platform_http
from slambase_admin.platform.storage import StorageClient
from slambase_admin.settings import Settings

log = get_logger(__name__)


async def _guard_redirect(_: Request, exc: GuardRedirect) -> RedirectResponse:
    return RedirectResponse(exc.location, status_code=HTTP_303_SEE_OTHER)


def create_app(
    *,
    settings: Settings,
    platform_transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """
    `platform_transport` replaces the network transport of the platform HTTP
    client (tests pass an `httpx.MockTransport`).
    """

    configure_logging(service_name=settings.service_name, level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        engine = create_engine(settings)
        sessionmaker = create_sessionmaker(engine)
        http = create_platform_http(settings, transport=platform_transport)
        auth_api = AuthApiClient(settings=settings, http=http)

        app.state.engine = engine
        app.state.sessionmaker = sessionmaker
        app.state.http = http
        app.state.auth_api = auth_api
        app.state.storage = StorageClient(settings=settings, http=http)
        app.state.gate = AdminGate(
            resolver=SessionResolver(settings=settings, auth_api=auth_api),
            lookup=SqlAdminLookup(sessionmaker),
            timeout_seconds=settings.auth_timeout_seconds,
        )
        if settings.env in ("dev", "test"):
            # Dev/test convenience; prod schemas come from Alembic migrations.
            await init_db(engine)
        try:
            yield
        finally:
            await http.aclose()
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="SlamBase Admin",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Last added runs first: request context wraps the gate.
    app.add_middleware(AdminGateMiddleware)
    app.add_middleware(RequestContextMiddleware)
    app.add_exception_handler(GuardRedirect, _guard_redirect)  # type: ignore[arg-type]

    app.include_router(health_router, tags=["health"])
    app.include_router(login_router)
    app.include_router(dashboard_router)
    app.include_router(wrestlers_router)
    app.include_router(catalog_router)

    return app


# --- Module Notes -----------------------------------------------------------
# Routes never build their own clients; everything comes from app.state via
# `slambase_admin.api.deps`, which keeps collaborators swappable in tests.
