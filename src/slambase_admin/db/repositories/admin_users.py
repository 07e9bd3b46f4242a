"""
slambase_admin.db.repositories.admin_users

Read-only repository for `AdminUser` rows.

Rows are provisioned out-of-band; this service never writes them.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from slambase_admin.db.models import AdminUser


class AdminUserRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, identity_id: str) -> AdminUser | None:
        return await self._session.get(AdminUser, identity_id)
