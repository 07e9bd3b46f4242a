from __future__ import annotations

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from slambase_admin.db.models import Wrestler, WrestlerStatus
from slambase_admin.db.repositories.tables import TableRepo


class WrestlerRepo(TableRepo[Wrestler]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Wrestler)

    async def search(
        self,
        *,
        q: str | None = None,
        status: WrestlerStatus | None = None,
        promotion_id: int | None = None,
    ) -> list[Wrestler]:
        stmt = select(Wrestler).order_by(Wrestler.name)
        if q:
            pattern = f"%{q.strip()}%"
            stmt = stmt.where(or_(Wrestler.name.ilike(pattern), Wrestler.ring_name.ilike(pattern)))
        if status is not None:
            stmt = stmt.where(Wrestler.status == status)
        if promotion_id is not None:
            stmt = stmt.where(Wrestler.promotion_id == promotion_id)
        return list((await self._session.execute(stmt)).scalars().all())
