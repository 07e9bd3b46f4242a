"""
slambase_admin.api.routers.dashboard

Dashboard landing screen.

Responsibilities:
- Roster counts, recent additions and quick-action links for signed-in admins.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.responses import RedirectResponse
from starlette.status import HTTP_303_SEE_OTHER

from slambase_admin.api.deps import db_session
from slambase_admin.auth.deps import require_admin
from slambase_admin.auth.gate import DASHBOARD_PATH
from slambase_admin.auth.models import AdminRecord
from slambase_admin.db.models import Championship, Event, Feud, Wrestler
from slambase_admin.db.repositories.tables import TableRepo

router = APIRouter(prefix="/admin", tags=["dashboard"])

RECENT_LIMIT = 5

QUICK_ACTIONS: list[dict[str, str]] = [
    {"title": "Add Wrestler", "description": "Create new profile", "href": "/admin/wrestlers/new"},
    {
        "title": "Add Championship",
        "description": "Create new title",
        "href": "/admin/championships",
    },
    {"title": "Add Event", "description": "Schedule show", "href": "/admin/events"},
    {"title": "Add Feud", "description": "Create storyline", "href": "/admin/feuds"},
]


@router.get("")
async def admin_root() -> RedirectResponse:
    return RedirectResponse(DASHBOARD_PATH, status_code=HTTP_303_SEE_OTHER)


@router.get("/dashboard")
async def dashboard(
    admin: AdminRecord = Depends(require_admin),
    session: AsyncSession = Depends(db_session),
) -> dict[str, Any]:
    wrestlers = TableRepo(session, Wrestler)
    events = TableRepo(session, Event)

    # One session, so these run sequentially.
    stats = {
        "wrestlers": await wrestlers.count(),
        "championships": await TableRepo(session, Championship).count(),
        "events": await events.count(),
        "feuds": await TableRepo(session, Feud).count(),
    }
    recent_wrestlers = await wrestlers.list_rows(
        order_by="created_at", descending=True, limit=RECENT_LIMIT
    )
    recent_events = await events.list_rows(
        order_by="created_at", descending=True, limit=RECENT_LIMIT
    )

    return {
        "admin": admin.chrome(),
        "stats": stats,
        "quick_actions": QUICK_ACTIONS,
        "recent_wrestlers": [
            {
                "id": w.id,
                "title": w.display_name,
                "subtitle": f"Added {w.created_at.date().isoformat()}",
                "badge": "New",
            }
            for w in recent_wrestlers
        ],
        "recent_events": [
            {
                "id": e.id,
                "title": e.name,
                "subtitle": e.event_date.isoformat(),
                "badge": e.event_type.value,
            }
            for e in recent_events
        ],
    }
