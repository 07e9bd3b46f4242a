"""
slambase_admin.api.routers.catalog

CRUD screens for championships, events, feuds and the promotions list.

Responsibilities:
- Build one list/create/detail/update/delete router per table from its
  request/response models.
- Map missing rows to 404 and constraint violations to 409.
"""

# No `from __future__ import annotations` here: the route factory annotates
# handler parameters with closure variables, which FastAPI must see as classes.

from datetime import date, datetime
from typing import Any, ClassVar

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field, model_validator
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED, HTTP_404_NOT_FOUND, HTTP_409_CONFLICT

from slambase_admin.api.deps import db_session
from slambase_admin.auth.deps import require_admin
from slambase_admin.auth.models import AdminRecord
from slambase_admin.db.base import Base
from slambase_admin.db.models import (
    Championship,
    ChampionshipTier,
    Event,
    EventType,
    Feud,
    FeudRole,
    FeudStatus,
    Promotion,
)
from slambase_admin.db.repositories.tables import TableRepo
from slambase_admin.observability.logging import get_logger

log = get_logger(__name__)

router = APIRouter(prefix="/admin")


class _Row(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class _Patch(BaseModel):
    # Columns that may be left out of a PATCH but never set to null.
    required: ClassVar[frozenset[str]] = frozenset()

    @model_validator(mode="after")
    def _no_null_required(self) -> "_Patch":
        sent = self.model_fields_set & self.required
        nulled = sorted(n for n in sent if getattr(self, n) is None)
        if nulled:
            raise ValueError(f"{', '.join(nulled)} may not be null")
        return self


# Championships


class ChampionshipCreate(BaseModel):
    name: str = Field(min_length=2, max_length=200)
    tier: ChampionshipTier
    promotion_id: int | None = None
    current_champion_id: int | None = None
    is_active: bool = True


class ChampionshipUpdate(_Patch):
    required: ClassVar[frozenset[str]] = frozenset({"name", "tier", "is_active"})

    name: str | None = Field(default=None, min_length=2, max_length=200)
    tier: ChampionshipTier | None = None
    promotion_id: int | None = None
    current_champion_id: int | None = None
    is_active: bool | None = None


class ChampionshipOut(_Row):
    id: int
    name: str
    tier: ChampionshipTier
    promotion_id: int | None
    current_champion_id: int | None
    is_active: bool
    created_at: datetime
    updated_at: datetime


# Events


class EventCreate(BaseModel):
    name: str = Field(min_length=2, max_length=200)
    event_date: date
    event_type: EventType
    venue: str | None = Field(default=None, max_length=200)
    location: str | None = Field(default=None, max_length=200)
    promotion_id: int | None = None


class EventUpdate(_Patch):
    required: ClassVar[frozenset[str]] = frozenset({"name", "event_date", "event_type"})

    name: str | None = Field(default=None, min_length=2, max_length=200)
    event_date: date | None = None
    event_type: EventType | None = None
    venue: str | None = Field(default=None, max_length=200)
    location: str | None = Field(default=None, max_length=200)
    promotion_id: int | None = None


class EventOut(_Row):
    id: int
    name: str
    event_date: date
    event_type: EventType
    venue: str | None
    location: str | None
    promotion_id: int | None
    created_at: datetime
    updated_at: datetime


# Feuds


class FeudCreate(BaseModel):
    name: str = Field(min_length=2, max_length=200)
    description: str | None = None
    status: FeudStatus = FeudStatus.active
    start_date: date | None = None
    end_date: date | None = None
    promotion_id: int | None = None


class FeudUpdate(_Patch):
    required: ClassVar[frozenset[str]] = frozenset({"name", "status"})

    name: str | None = Field(default=None, min_length=2, max_length=200)
    description: str | None = None
    status: FeudStatus | None = None
    start_date: date | None = None
    end_date: date | None = None
    promotion_id: int | None = None


class FeudOut(_Row):
    id: int
    name: str
    description: str | None
    status: FeudStatus
    start_date: date | None
    end_date: date | None
    promotion_id: int | None
    created_at: datetime
    updated_at: datetime


class FeudParticipantOut(_Row):
    wrestler_id: int
    role: FeudRole


class FeudDetail(FeudOut):
    participants: list[FeudParticipantOut] = Field(default_factory=list)


class PromotionOut(_Row):
    id: int
    name: str
    abbreviation: str | None


def _crud_router(
    *,
    name: str,
    label: str,
    model: type[Base],
    create_schema: type[BaseModel],
    update_schema: type[BaseModel],
    out_schema: type[BaseModel],
    detail_schema: type[BaseModel] | None = None,
    order_by: str = "name",
    descending: bool = False,
) -> APIRouter:
    sub = APIRouter(prefix=f"/{name}", tags=[name])
    detail_schema = detail_schema or out_schema
    not_found = f"{label} not found"

    def dump(schema: type[BaseModel], row: Any) -> dict[str, Any]:
        return schema.model_validate(row).model_dump(mode="json")

    def conflict(e: IntegrityError) -> HTTPException:
        log.warning("catalog_conflict", table=name, error=str(e.orig))
        return HTTPException(
            status_code=HTTP_409_CONFLICT, detail=f"{label} conflicts with existing data"
        )

    @sub.get("")
    async def list_rows(
        admin: AdminRecord = Depends(require_admin),
        session: AsyncSession = Depends(db_session),
    ) -> dict[str, Any]:
        rows = await TableRepo(session, model).list_rows(order_by=order_by, descending=descending)
        return {
            "admin": admin.chrome(),
            "count": len(rows),
            name: [dump(out_schema, r) for r in rows],
        }

    @sub.post("", status_code=HTTP_201_CREATED, dependencies=[Depends(require_admin)])
    async def create_row(
        body: create_schema,  # type: ignore[valid-type]
        session: AsyncSession = Depends(db_session),
    ) -> dict[str, Any]:
        try:
            row = await TableRepo(session, model).insert(body.model_dump())
            await session.commit()
        except IntegrityError as e:
            await session.rollback()
            raise conflict(e) from e
        log.info("catalog_created", table=name, row_id=row.id)
        return dump(out_schema, row)

    @sub.get("/{row_id}")
    async def get_row(
        row_id: int,
        admin: AdminRecord = Depends(require_admin),
        session: AsyncSession = Depends(db_session),
    ) -> dict[str, Any]:
        row = await TableRepo(session, model).get(row_id)
        if row is None:
            raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail=not_found)
        return {"admin": admin.chrome(), "item": dump(detail_schema, row)}

    @sub.patch("/{row_id}", dependencies=[Depends(require_admin)])
    async def update_row(
        row_id: int,
        body: update_schema,  # type: ignore[valid-type]
        session: AsyncSession = Depends(db_session),
    ) -> dict[str, Any]:
        values = body.model_dump(exclude_unset=True)
        try:
            row = await TableRepo(session, model).update(row_id, values)
            await session.commit()
        except IntegrityError as e:
            await session.rollback()
            raise conflict(e) from e
        if row is None:
            raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail=not_found)
        return dump(out_schema, row)

    @sub.delete("/{row_id}", dependencies=[Depends(require_admin)])
    async def delete_row(
        row_id: int,
        session: AsyncSession = Depends(db_session),
    ) -> dict[str, Any]:
        try:
            row = await TableRepo(session, model).delete(row_id)
            await session.commit()
        except IntegrityError as e:
            await session.rollback()
            raise conflict(e) from e
        if row is None:
            raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail=not_found)
        log.info("catalog_deleted", table=name, row_id=row_id)
        return {"deleted": row_id}

    return sub


router.include_router(
    _crud_router(
        name="championships",
        label="Championship",
        model=Championship,
        create_schema=ChampionshipCreate,
        update_schema=ChampionshipUpdate,
        out_schema=ChampionshipOut,
    )
)
router.include_router(
    _crud_router(
        name="events",
        label="Event",
        model=Event,
        create_schema=EventCreate,
        update_schema=EventUpdate,
        out_schema=EventOut,
        order_by="event_date",
        descending=True,
    )
)
router.include_router(
    _crud_router(
        name="feuds",
        label="Feud",
        model=Feud,
        create_schema=FeudCreate,
        update_schema=FeudUpdate,
        out_schema=FeudOut,
        detail_schema=FeudDetail,
    )
)


@router.get("/promotions", tags=["promotions"])
async def list_promotions(
    admin: AdminRecord = Depends(require_admin),
    session: AsyncSession = Depends(db_session),
) -> dict[str, Any]:
    rows = await TableRepo(session, Promotion).list_rows(order_by="name")
    return {
        "admin": admin.chrome(),
        "promotions": [PromotionOut.model_validate(p).model_dump(mode="json") for p in rows],
    }


# --- Module Notes -----------------------------------------------------------
# Only feud details expose participants; they are read here and maintained in
# the database directly.
