"""
slambase_admin.db.repositories.tables

Generic table repository.

Responsibilities:
- Filtered reads, counts, inserts, updates and deletes over any mapped table
  with a single-column primary key.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Generic, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from slambase_admin.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class TableRepo(Generic[ModelT]):
    def __init__(self, session: AsyncSession, model: type[ModelT]) -> None:
        self._session = session
        self._model = model

    def _column(self, name: str):
        if name not in self._model.__table__.columns:
            raise ValueError(f"{self._model.__tablename__} has no column {name!r}")
        return getattr(self._model, name)

    def _filtered(self, stmt: Select, filters: Mapping[str, Any] | None) -> Select:
        for name, value in (filters or {}).items():
            stmt = stmt.where(self._column(name) == value)
        return stmt

    async def list_rows(
        self,
        *,
        filters: Mapping[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[ModelT]:
        stmt = self._filtered(select(self._model), filters)
        if order_by is not None:
            col = self._column(order_by)
            stmt = stmt.order_by(col.desc() if descending else col.asc())
        if limit is not None:
            stmt = stmt.limit(limit)
        return list((await self._session.execute(stmt)).scalars().all())

    async def count(self, *, filters: Mapping[str, Any] | None = None) -> int:
        stmt = self._filtered(select(func.count()).select_from(self._model), filters)
        return int((await self._session.execute(stmt)).scalar_one())

    async def get(self, pk: Any) -> ModelT | None:
        return await self._session.get(self._model, pk)

    async def insert(self, values: Mapping[str, Any]) -> ModelT:
        for name in values:
            self._column(name)
        row = self._model(**values)
        self._session.add(row)
        await self._session.flush()
        return row

    async def update(self, pk: Any, values: Mapping[str, Any]) -> ModelT | None:
        row = await self._session.get(self._model, pk, with_for_update=True)
        if row is None:
            return None
        for name, value in values.items():
            self._column(name)
            setattr(row, name, value)
        await self._session.flush()
        return row

    async def delete(self, pk: Any) -> ModelT | None:
        # Returns the deleted row so callers can clean up what it referenced.
        row = await self._session.get(self._model, pk)
        if row is None:
            return None
        await self._session.delete(row)
        await self._session.flush()
        return row
