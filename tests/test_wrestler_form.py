"""
tests.test_wrestler_form

Wrestler create/update/delete flow against an in-memory DB and the fake
storage API.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from slambase_admin.db.init_db import init_db
from slambase_admin.db.models import Wrestler, WrestlerStatus
from slambase_admin.db.repositories.wrestlers import WrestlerRepo
from slambase_admin.db.session import create_engine, create_sessionmaker
from slambase_admin.platform.http import create_platform_http
from slambase_admin.platform.storage import StorageClient
from slambase_admin.services.wrestler_form import (
    FormStatus,
    UploadedImage,
    WrestlerFormService,
)

PNG = UploadedImage(filename="Portrait.PNG", content_type="image/png", data=b"\x89PNG-bytes")


@pytest_asyncio.fixture()
async def session(settings) -> AsyncIterator[AsyncSession]:
    engine = create_engine(settings)
    await init_db(engine)
    async with create_sessionmaker(engine)() as s:
        yield s
    await engine.dispose()


@pytest_asyncio.fixture()
async def storage(settings, platform) -> AsyncIterator[StorageClient]:
    http = create_platform_http(settings, transport=platform.transport())
    async with http:
        yield StorageClient(settings=settings, http=http)


@pytest.fixture()
def service(session, storage, settings) -> WrestlerFormService:
    return WrestlerFormService(session=session, storage=storage, settings=settings)


async def _count(session: AsyncSession) -> int:
    return int((await session.execute(select(func.count()).select_from(Wrestler))).scalar_one())


def test_image_extension_prefers_filename() -> None:
    assert PNG.extension == "png"
    assert UploadedImage(filename="blob", content_type="image/webp", data=b"").extension == "webp"


@pytest.mark.asyncio
async def test_invalid_form_makes_no_storage_or_db_calls(service, session, platform) -> None:
    doc = UploadedImage(filename="notes.pdf", content_type="application/pdf", data=b"%PDF")
    outcome = await service.submit({"name": "X", "status": "active"}, image=doc)

    assert outcome.status is FormStatus.invalid
    assert outcome.errors == {
        "name": "Name must be at least 2 characters",
        "image": "Please upload an image file (JPG, PNG, WebP)",
    }
    assert outcome.notification is None
    assert platform.calls == []
    assert await _count(session) == 0


@pytest.mark.asyncio
async def test_oversized_image_message_uses_configured_limit(session, storage, settings) -> None:
    small = settings.model_copy(update={"max_image_bytes": 1024 * 1024})
    svc = WrestlerFormService(session=session, storage=storage, settings=small)
    big = UploadedImage(
        filename="big.jpg", content_type="image/jpeg", data=b"0" * (1024 * 1024 + 1)
    )

    values, errors = svc.validate({"name": "Big Show"}, big)

    assert values is None
    assert errors == {"image": "Please upload an image smaller than 1.0MB"}


@pytest.mark.asyncio
async def test_blank_optional_fields_become_null(service) -> None:
    values, errors = service.validate(
        {"name": "  Bret Hart ", "ring_name": "", "promotion_id": "", "debut_date": ""}
    )
    assert errors == {}
    assert values is not None
    assert values.name == "Bret Hart"
    assert values.ring_name is None
    assert values.promotion_id is None
    assert values.status is WrestlerStatus.active


@pytest.mark.asyncio
async def test_create_with_image(service, session, platform) -> None:
    outcome = await service.submit(
        {"name": "Mark Calaway", "ring_name": "The Undertaker", "status": "retired"}, image=PNG
    )

    assert outcome.status is FormStatus.saved
    assert outcome.redirect_to == "/admin/wrestlers"
    assert outcome.notification is not None
    assert outcome.notification.title == "Wrestler created!"
    assert outcome.notification.description == "The Undertaker has been added to the roster."

    row = await session.get(Wrestler, outcome.wrestler_id)
    assert row is not None
    assert row.status is WrestlerStatus.retired
    (key,) = platform.objects
    assert key.startswith("wrestlers/") and key.endswith(".png")
    assert row.image_url == f"http://platform.test/storage/v1/object/public/wrestlers/{key}"


@pytest.mark.asyncio
async def test_update_survives_failed_old_image_delete(service, session, platform) -> None:
    created = await service.submit({"name": "Shawn Michaels"}, image=PNG)
    (old_key,) = platform.objects
    platform.fail_remove = True

    row = await session.get(Wrestler, created.wrestler_id)
    new_png = UploadedImage(filename="hbk.webp", content_type="image/webp", data=b"RIFF")
    outcome = await service.submit(
        {"name": "Shawn Michaels", "ring_name": "HBK"}, image=new_png, wrestler=row
    )

    assert outcome.status is FormStatus.saved
    assert outcome.notification is not None
    assert outcome.notification.title == "Wrestler updated!"
    assert outcome.notification.description == "HBK has been updated successfully."
    assert old_key in platform.objects
    assert len(platform.objects) == 2
    assert row.image_url is not None and row.image_url.endswith(".webp")


@pytest.mark.asyncio
async def test_upload_failure_reports_and_writes_nothing(service, session, platform) -> None:
    platform.fail_put = True
    outcome = await service.submit({"name": "Bret Hart"}, image=PNG)

    assert outcome.status is FormStatus.failed
    assert outcome.notification is not None
    assert outcome.notification.level == "error"
    assert outcome.notification.title == "Failed to save wrestler"
    assert outcome.notification.description == "Please try again."
    assert outcome.redirect_to is None
    assert await _count(session) == 0


@pytest.mark.asyncio
async def test_remove_image_clears_url_and_deletes_object(service, session, platform) -> None:
    created = await service.submit({"name": "Lita"}, image=PNG)
    row = await session.get(Wrestler, created.wrestler_id)

    outcome = await service.submit({"name": "Lita", "remove_image": "true"}, wrestler=row)

    assert outcome.status is FormStatus.saved
    assert row.image_url is None
    assert platform.objects == {}


@pytest.mark.asyncio
async def test_update_without_new_image_keeps_current(service, session, platform) -> None:
    created = await service.submit({"name": "Trish Stratus"}, image=PNG)
    row = await session.get(Wrestler, created.wrestler_id)
    image_url = row.image_url

    await service.submit({"name": "Trish Stratus", "brand": "Raw"}, wrestler=row)

    assert row.image_url == image_url
    assert row.brand == "Raw"
    assert len(platform.objects) == 1


@pytest.mark.asyncio
async def test_delete_removes_row_then_image(service, session, platform) -> None:
    created = await service.submit({"name": "Edge"}, image=PNG)
    row = await session.get(Wrestler, created.wrestler_id)

    outcome = await service.delete(row)

    assert outcome.status is FormStatus.saved
    assert outcome.redirect_to == "/admin/wrestlers"
    assert outcome.notification is not None
    assert outcome.notification.title == "Wrestler deleted!"
    assert outcome.notification.description == "Edge has been removed from the roster."
    assert await _count(session) == 0
    assert platform.objects == {}


@pytest.mark.asyncio
async def test_delete_failure_keeps_row_and_image(service, session, platform, monkeypatch) -> None:
    created = await service.submit({"name": "Christian"}, image=PNG)
    row = await session.get(Wrestler, created.wrestler_id)

    async def db_down(self, pk):
        raise OperationalError("DELETE FROM wrestlers", {}, Exception("db down"))

    monkeypatch.setattr(WrestlerRepo, "delete", db_down)
    outcome = await service.delete(row)

    assert outcome.status is FormStatus.failed
    assert outcome.redirect_to is None
    assert outcome.notification is not None
    assert outcome.notification.level == "error"
    assert outcome.notification.title == "Failed to delete wrestler"
    assert outcome.notification.description == "Please try again."
    assert await _count(session) == 1
    assert len(platform.objects) == 1
