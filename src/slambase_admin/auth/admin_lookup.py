"""
slambase_admin.auth.admin_lookup

Authorization lookup: is there an `admin_users` row for this identity?

Responsibilities:
- Define the lookup contract consumed by the gate.
- Provide the SQLAlchemy-backed implementation.
"""

from __future__ import annotations

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from slambase_admin.auth.models import AdminRecord
from slambase_admin.db.repositories.admin_users import AdminUserRepo


class AdminLookup(Protocol):
    async def find_admin(self, identity_id: str) -> AdminRecord | None: ...


class SqlAdminLookup:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def find_admin(self, identity_id: str) -> AdminRecord | None:
        # Store failures propagate; the gate turns them into an auth-error redirect.
        async with self._session_factory() as session:
            row = await AdminUserRepo(session).get(identity_id)
        if row is None:
            return None
        return AdminRecord(id=row.id, role=row.role, email=row.email)
