"""
slambase_admin.api.routers.health

Health and readiness endpoints.

Responsibilities:
- Provide liveness probe (`/healthz`).
- Provide readiness probe (`/readyz`): the admin gate cannot decide anything
  without the `admin_users` table, so readiness queries it.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from slambase_admin import __version__
from slambase_admin.api.deps import db_session
from slambase_admin.db.models import AdminUser

router = APIRouter()


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok", "version": __version__}


@router.get("/readyz")
async def readyz(session: AsyncSession = Depends(db_session)) -> dict[str, str]:
    await session.execute(select(AdminUser.id).limit(1))
    return {"status": "ready"}


# --- Module Notes -----------------------------------------------------------
# Both probes live outside /admin, so the gate never runs for them.
