"""
slambase_admin.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Hand collaborators (settings, DB sessions, platform clients) to routes
  explicitly, from the instances created once at app startup.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from slambase_admin.platform.auth_api import AuthApiClient
from slambase_admin.platform.storage import StorageClient
from slambase_admin.settings import Settings


def settings_dep(request: Request) -> Settings:
    return request.app.state.settings  # type: ignore[no-any-return]


def sessionmaker_from_app(request: Request) -> async_sessionmaker[AsyncSession]:
    # Created in the lifespan of `slambase_admin.api.app.create_app`.
    return request.app.state.sessionmaker  # type: ignore[no-any-return]


async def db_session(
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
) -> AsyncIterator[AsyncSession]:
    # Request-scoped DB session. Commit/rollback is managed explicitly by routes/services.
    async with session_factory() as session:
        yield session


def auth_api_dep(request: Request) -> AuthApiClient:
    return request.app.state.auth_api  # type: ignore[no-any-return]


def storage_dep(request: Request) -> StorageClient:
    return request.app.state.storage  # type: ignore[no-any-return]
