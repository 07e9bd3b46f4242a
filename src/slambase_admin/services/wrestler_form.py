"""
slambase_admin.services.wrestler_form

Wrestler create/update/delete flow.

Responsibilities:
- Validate submitted form values and the optional image locally, before any
  storage or database call.
- Upload a replacement image under a fresh, collision-resistant name.
- Insert/update the row, then best-effort remove images that are no longer used.
- Report the result as a user-facing outcome (errors, notification, redirect).
"""

from __future__ import annotations

import enum
import time
import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from slambase_admin.db.models import Wrestler, WrestlerStatus
from slambase_admin.db.repositories.wrestlers import WrestlerRepo
from slambase_admin.observability.logging import get_logger
from slambase_admin.platform.http import PlatformError
from slambase_admin.platform.storage import StorageClient
from slambase_admin.settings import Settings

log = get_logger(__name__)

ROSTER_PATH = "/admin/wrestlers"


class WrestlerFormValues(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    name: str
    ring_name: str | None = None
    bio: str | None = None
    birthplace: str | None = None
    height: str | None = None
    weight: str | None = None
    finishing_move: str | None = None
    signature_move: str | None = None
    debut_date: date | None = None
    birth_date: date | None = None
    promotion_id: int | None = None
    brand: str | None = None
    status: WrestlerStatus = WrestlerStatus.active
    remove_image: bool = False

    @field_validator(
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
        mode="before",
    )
    @classmethod
    def _blank_is_none(cls, v: Any) -> Any:
        # HTML forms submit untouched inputs as "".
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("name")
    @classmethod
    def _name_length(cls, v: str) -> str:
        if len(v) < 2:
            raise ValueError("Name must be at least 2 characters")
        return v

    def row_values(self) -> dict[str, Any]:
        return self.model_dump(exclude={"remove_image"})


@dataclass(frozen=True, slots=True)
class UploadedImage:
    filename: str
    content_type: str
    data: bytes

    @property
    def extension(self) -> str:
        if "." in self.filename:
            return self.filename.rsplit(".", 1)[1].lower()
        return self.content_type.split("/", 1)[-1].lower()


@dataclass(frozen=True, slots=True)
class Notification:
    level: Literal["success", "error"]
    title: str
    description: str | None = None


class FormStatus(enum.StrEnum):
    saved = "SAVED"
    invalid = "INVALID"
    failed = "FAILED"


@dataclass(frozen=True, slots=True)
class FormOutcome:
    status: FormStatus
    errors: dict[str, str] = field(default_factory=dict)
    notification: Notification | None = None
    redirect_to: str | None = None
    wrestler_id: int | None = None


def _object_path(image: UploadedImage) -> str:
    return f"wrestlers/{int(time.time() * 1000)}-{uuid.uuid4().hex}.{image.extension}"


def _field_errors(exc: ValidationError) -> dict[str, str]:
    errors: dict[str, str] = {}
    for err in exc.errors():
        name = str(err["loc"][0]) if err["loc"] else "__all__"
        if err["type"] == "value_error" and "error" in err.get("ctx", {}):
            msg = str(err["ctx"]["error"])
        else:
            msg = err["msg"]
        errors.setdefault(name, msg)
    return errors


class WrestlerFormService:
    def __init__(
        self,
        *,
        session: AsyncSession,
        storage: StorageClient,
        settings: Settings,
    ) -> None:
        self._session = session
        self._storage = storage
        self._settings = settings
        self._wrestlers = WrestlerRepo(session)

    def validate(
        self, raw: Mapping[str, Any], image: UploadedImage | None = None
    ) -> tuple[WrestlerFormValues | None, dict[str, str]]:
        values: WrestlerFormValues | None = None
        errors: dict[str, str] = {}
        try:
            values = WrestlerFormValues.model_validate(dict(raw))
        except ValidationError as e:
            errors = _field_errors(e)

        if image is not None:
            if not image.content_type.startswith("image/"):
                errors["image"] = "Please upload an image file (JPG, PNG, WebP)"
            elif len(image.data) > self._settings.max_image_bytes:
                limit_mb = self._settings.max_image_bytes / 1024 / 1024
                errors["image"] = f"Please upload an image smaller than {limit_mb:.1f}MB"

        return (None if errors else values), errors

    async def submit(
        self,
        raw: Mapping[str, Any],
        *,
        image: UploadedImage | None = None,
        wrestler: Wrestler | None = None,
    ) -> FormOutcome:
        values, errors = self.validate(raw, image)
        if values is None:
            return FormOutcome(status=FormStatus.invalid, errors=errors)

        bucket = self._settings.storage_bucket
        wrestler_id = wrestler.id if wrestler is not None else None
        previous_url = wrestler.image_url if wrestler is not None else None
        image_url = previous_url
        uploaded_path: str | None = None

        try:
            if image is not None:
                uploaded_path = _object_path(image)
                image_url = await self._storage.put(
                    bucket, uploaded_path, image.data, content_type=image.content_type
                )
            elif values.remove_image:
                image_url = None

            row_values = {**values.row_values(), "image_url": image_url}
            if wrestler_id is not None:
                row = await self._wrestlers.update(wrestler_id, row_values)
                if row is None:
                    raise LookupError(f"wrestler {wrestler_id} disappeared during update")
            else:
                row = await self._wrestlers.insert(row_values)
            await self._session.commit()
        except (PlatformError, SQLAlchemyError, LookupError) as e:
            await self._session.rollback()
            log.warning("wrestler_save_failed", wrestler_id=wrestler_id, error=str(e))
            if uploaded_path is not None:
                await self._remove_quietly(uploaded_path)
            return FormOutcome(
                status=FormStatus.failed,
                notification=Notification("error", "Failed to save wrestler", "Please try again."),
            )

        if previous_url and previous_url != image_url:
            await self._remove_url_quietly(previous_url)

        log.info("wrestler_saved", wrestler_id=row.id, created=wrestler_id is None)
        if wrestler_id is None:
            note = Notification(
                "success", "Wrestler created!", f"{row.display_name} has been added to the roster."
            )
        else:
            note = Notification(
                "success", "Wrestler updated!", f"{row.display_name} has been updated successfully."
            )
        return FormOutcome(
            status=FormStatus.saved,
            notification=note,
            redirect_to=ROSTER_PATH,
            wrestler_id=row.id,
        )

    async def delete(self, wrestler: Wrestler) -> FormOutcome:
        # Read before the write; a rollback expires the instance.
        wrestler_id = wrestler.id
        display_name = wrestler.display_name
        image_url = wrestler.image_url
        try:
            await self._wrestlers.delete(wrestler_id)
            await self._session.commit()
        except SQLAlchemyError as e:
            await self._session.rollback()
            log.warning("wrestler_delete_failed", wrestler_id=wrestler_id, error=str(e))
            return FormOutcome(
                status=FormStatus.failed,
                notification=Notification(
                    "error", "Failed to delete wrestler", "Please try again."
                ),
                wrestler_id=wrestler_id,
            )
        log.info("wrestler_deleted", wrestler_id=wrestler_id)

        # The row is gone either way; a stale object in storage is acceptable.
        if image_url:
            await self._remove_url_quietly(image_url)
        return FormOutcome(
            status=FormStatus.saved,
            notification=Notification(
                "success",
                "Wrestler deleted!",
                f"{display_name} has been removed from the roster.",
            ),
            redirect_to=ROSTER_PATH,
            wrestler_id=wrestler_id,
        )

    async def _remove_url_quietly(self, url: str) -> None:
        path = self._storage.path_from_public_url(self._settings.storage_bucket, url)
        if path is not None:
            await self._remove_quietly(path)

    async def _remove_quietly(self, path: str) -> None:
        try:
            await self._storage.remove(self._settings.storage_bucket, [path])
        except PlatformError as e:
            log.warning("image_remove_failed", object_path=path, error=e.message)


# --- Module Notes -----------------------------------------------------------
# Storage and DB writes are not atomic together. Ordering (upload, write, then
# delete the old object) means a failure can leave an orphaned object, never a
# row pointing at a missing one.
