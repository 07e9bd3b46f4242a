"""
slambase_admin.api.routers.wrestlers

Wrestler roster screens.

Responsibilities:
- List/search the roster and show wrestler details.
- Serve create/edit form payloads and accept multipart submissions.
- Delete wrestlers (row first, image best-effort).
"""

from __future__ import annotations

from dataclasses import asdict
from datetime import date, datetime
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, ConfigDict
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.datastructures import UploadFile
from starlette.responses import JSONResponse
from starlette.status import (
    HTTP_200_OK,
    HTTP_201_CREATED,
    HTTP_404_NOT_FOUND,
    HTTP_502_BAD_GATEWAY,
)

from slambase_admin.api.deps import db_session, settings_dep, storage_dep
from slambase_admin.auth.deps import require_admin
from slambase_admin.auth.models import AdminRecord
from slambase_admin.db.models import Promotion, Wrestler, WrestlerStatus
from slambase_admin.db.repositories.tables import TableRepo
from slambase_admin.db.repositories.wrestlers import WrestlerRepo
from slambase_admin.platform.storage import StorageClient
from slambase_admin.services.wrestler_form import (
    FormOutcome,
    FormStatus,
    UploadedImage,
    WrestlerFormService,
)
from slambase_admin.settings import Settings

router = APIRouter(prefix="/admin/wrestlers", tags=["wrestlers"])

FORM_FIELDS = (
    "name",
    "ring_name",
    "bio",
    "birthplace",
    "height",
    "weight",
    "finishing_move",
    "signature_move",
    "debut_date",
    "birth_date",
    "promotion_id",
    "brand",
    "status",
)


class PromotionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    abbreviation: str | None = None


class WrestlerOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    ring_name: str | None
    bio: str | None
    birthplace: str | None
    height: str | None
    weight: str | None
    finishing_move: str | None
    signature_move: str | None
    debut_date: date | None
    birth_date: date | None
    promotion_id: int | None
    brand: str | None
    status: WrestlerStatus
    image_url: str | None
    created_at: datetime
    updated_at: datetime
    promotion: PromotionOut | None = None


def _dump(row: Wrestler) -> dict[str, Any]:
    return WrestlerOut.model_validate(row).model_dump(mode="json")


async def _promotions(session: AsyncSession) -> list[dict[str, Any]]:
    rows = await TableRepo(session, Promotion).list_rows(order_by="name")
    return [PromotionOut.model_validate(p).model_dump(mode="json") for p in rows]


async def _get_or_404(session: AsyncSession, wrestler_id: int) -> Wrestler:
    row = await WrestlerRepo(session).get(wrestler_id)
    if row is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Wrestler not found")
    return row


async def _read_form(request: Request) -> tuple[dict[str, Any], UploadedImage | None]:
    form = await request.form()
    raw: dict[str, Any] = {k: v for k, v in form.items() if isinstance(v, str)}
    image: UploadedImage | None = None
    upload = form.get("image")
    # An untouched file input still arrives, with an empty filename.
    if isinstance(upload, UploadFile) and upload.filename:
        image = UploadedImage(
            filename=upload.filename,
            content_type=upload.content_type or "application/octet-stream",
            data=await upload.read(),
        )
    return raw, image


def _outcome_response(outcome: FormOutcome, *, created: bool) -> JSONResponse:
    if outcome.status is FormStatus.saved:
        status_code = HTTP_201_CREATED if created else HTTP_200_OK
    elif outcome.status is FormStatus.invalid:
        status_code = 422
    else:
        status_code = HTTP_502_BAD_GATEWAY
    return JSONResponse(asdict(outcome), status_code=status_code)


@router.get("")
async def list_wrestlers(
    q: str | None = None,
    status: WrestlerStatus | None = None,
    promotion_id: int | None = None,
    admin: AdminRecord = Depends(require_admin),
    session: AsyncSession = Depends(db_session),
) -> dict[str, Any]:
    rows = await WrestlerRepo(session).search(q=q, status=status, promotion_id=promotion_id)
    return {
        "admin": admin.chrome(),
        "count": len(rows),
        "wrestlers": [_dump(w) for w in rows],
    }


@router.get("/new")
async def new_wrestler_form(
    admin: AdminRecord = Depends(require_admin),
    session: AsyncSession = Depends(db_session),
) -> dict[str, Any]:
    form = dict.fromkeys(FORM_FIELDS, None)
    form.update(name="", status=WrestlerStatus.active.value)
    return {
        "admin": admin.chrome(),
        "form": form,
        "image_url": None,
        "promotions": await _promotions(session),
    }


@router.post("", dependencies=[Depends(require_admin)])
async def create_wrestler(
    request: Request,
    session: AsyncSession = Depends(db_session),
    storage: StorageClient = Depends(storage_dep),
    settings: Settings = Depends(settings_dep),
) -> JSONResponse:
    raw, image = await _read_form(request)
    svc = WrestlerFormService(session=session, storage=storage, settings=settings)
    outcome = await svc.submit(raw, image=image)
    return _outcome_response(outcome, created=True)


@router.get("/{wrestler_id}")
async def get_wrestler(
    wrestler_id: int,
    admin: AdminRecord = Depends(require_admin),
    session: AsyncSession = Depends(db_session),
) -> dict[str, Any]:
    row = await _get_or_404(session, wrestler_id)
    return {"admin": admin.chrome(), "wrestler": _dump(row)}


@router.get("/{wrestler_id}/edit")
async def edit_wrestler_form(
    wrestler_id: int,
    admin: AdminRecord = Depends(require_admin),
    session: AsyncSession = Depends(db_session),
) -> dict[str, Any]:
    row = await _get_or_404(session, wrestler_id)
    current = _dump(row)
    return {
        "admin": admin.chrome(),
        "wrestler_id": row.id,
        "form": {name: current[name] for name in FORM_FIELDS},
        "image_url": row.image_url,
        "promotions": await _promotions(session),
    }


@router.post("/{wrestler_id}/edit", dependencies=[Depends(require_admin)])
async def update_wrestler(
    wrestler_id: int,
    request: Request,
    session: AsyncSession = Depends(db_session),
    storage: StorageClient = Depends(storage_dep),
    settings: Settings = Depends(settings_dep),
) -> JSONResponse:
    row = await _get_or_404(session, wrestler_id)
    raw, image = await _read_form(request)
    svc = WrestlerFormService(session=session, storage=storage, settings=settings)
    outcome = await svc.submit(raw, image=image, wrestler=row)
    return _outcome_response(outcome, created=False)


@router.delete("/{wrestler_id}", dependencies=[Depends(require_admin)])
async def delete_wrestler(
    wrestler_id: int,
    session: AsyncSession = Depends(db_session),
    storage: StorageClient = Depends(storage_dep),
    settings: Settings = Depends(settings_dep),
) -> JSONResponse:
    row = await _get_or_404(session, wrestler_id)
    svc = WrestlerFormService(session=session, storage=storage, settings=settings)
    outcome = await svc.delete(row)
    return _outcome_response(outcome, created=False)


# --- Module Notes -----------------------------------------------------------
# Form submissions are multipart because the image travels with the fields; the
# JSON outcome tells the UI whether to stay on the form or navigate to the roster.
