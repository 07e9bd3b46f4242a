"""
tests.conftest

Shared fixtures.

Responsibilities:
- Test settings (in-memory SQLite, fixed JWT secret).
- A fake hosted platform behind `httpx.MockTransport` (auth + storage APIs).
- App/client fixtures that run the lifespan explicitly.
"""

from __future__ import annotations

import json
import uuid
from collections.abc import AsyncIterator, Awaitable, Callable
from datetime import timedelta

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from slambase_admin.api.app import create_app
from slambase_admin.auth.jwt import JwtConfig, JwtValidationError, decode_and_validate, issue_token
from slambase_admin.auth.models import AdminRole
from slambase_admin.db.models import AdminUser
from slambase_admin.settings import Settings

JWT_SECRET = "test-secret-with-at-least-32-bytes!!"


class FakePlatform:
    """
    In-process stand-in for the platform auth and storage REST APIs.
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.jwt = JwtConfig(
            alg=settings.jwt_alg, audience=settings.jwt_audience, secret=JWT_SECRET
        )
        self.calls: list[tuple[str, str]] = []
        self.passwords: dict[str, tuple[str, str]] = {}  # email -> (password, user id)
        self.refresh_tokens: dict[str, tuple[str, str]] = {}  # token -> (user id, email)
        self.objects: dict[str, bytes] = {}
        self.signed_out: list[str] = []
        self.fail_put = False
        self.fail_remove = False

    def add_user(self, *, email: str, password: str, user_id: str | None = None) -> str:
        user_id = user_id or str(uuid.uuid4())
        self.passwords[email] = (password, user_id)
        return user_id

    def issue_session(self, user_id: str, email: str | None = None) -> dict[str, object]:
        refresh = f"rt-{uuid.uuid4().hex}"
        self.refresh_tokens[refresh] = (user_id, email or "")
        return {
            "access_token": issue_token(cfg=self.jwt, subject=user_id, email=email),
            "refresh_token": refresh,
            "token_type": "bearer",
            "expires_in": 3600,
            "user": {"id": user_id, "email": email},
        }

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.calls.append((request.method, path))

        if path == "/auth/v1/token":
            body = json.loads(request.content)
            grant = request.url.params.get("grant_type")
            if grant == "password":
                known = self.passwords.get(body.get("email", ""))
                if known is None or known[0] != body.get("password"):
                    return httpx.Response(
                        400, json={"error_description": "Invalid login credentials"}
                    )
                return httpx.Response(200, json=self.issue_session(known[1], body["email"]))
            if grant == "refresh_token":
                user = self.refresh_tokens.pop(body.get("refresh_token", ""), None)
                if user is None:
                    return httpx.Response(400, json={"error_description": "Invalid Refresh Token"})
                return httpx.Response(200, json=self.issue_session(*user))

        if path == "/auth/v1/user":
            token = request.headers.get("authorization", "").removeprefix("Bearer ")
            try:
                claims = decode_and_validate(cfg=self.jwt, token=token)
            except JwtValidationError:
                return httpx.Response(401, json={"msg": "invalid JWT"})
            return httpx.Response(200, json={"id": claims["sub"], "email": claims.get("email")})

        if path == "/auth/v1/logout":
            self.signed_out.append(request.headers.get("authorization", ""))
            return httpx.Response(204)

        prefix = f"/storage/v1/object/{self.settings.storage_bucket}"
        if path.startswith(prefix):
            if request.method == "POST":
                if self.fail_put:
                    return httpx.Response(500, json={"message": "storage down"})
                key = path.removeprefix(prefix + "/")
                self.objects[key] = request.content
                return httpx.Response(200, json={"Key": f"{self.settings.storage_bucket}/{key}"})
            if request.method == "DELETE":
                if self.fail_remove:
                    return httpx.Response(500, json={"message": "storage down"})
                for key in json.loads(request.content)["prefixes"]:
                    self.objects.pop(key, None)
                return httpx.Response(200, json=[])

        return httpx.Response(404, json={"message": "not found"})


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        env="test",
        platform_url="http://platform.test",
        platform_anon_key="anon-key",
        platform_service_key="service-key",
        jwt_secret=JWT_SECRET,
        database_url="sqlite+aiosqlite:///:memory:",
        auth_timeout_seconds=2.0,
    )


@pytest.fixture()
def platform(settings: Settings) -> FakePlatform:
    return FakePlatform(settings)


@pytest_asyncio.fixture()
async def app(settings: Settings, platform: FakePlatform) -> AsyncIterator[FastAPI]:
    app = create_app(settings=settings, platform_transport=platform.transport())
    # httpx ASGITransport does not manage lifespan automatically; do it explicitly.
    async with app.router.lifespan_context(app):
        yield app


@pytest_asyncio.fixture()
async def client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture()
def seed_admin(app: FastAPI) -> Callable[..., Awaitable[str]]:
    async def _seed(
        user_id: str | None = None, *, role: AdminRole = AdminRole.editor, email: str | None = None
    ) -> str:
        user_id = user_id or str(uuid.uuid4())
        async with app.state.sessionmaker() as session:
            session.add(AdminUser(id=user_id, role=role, email=email))
            await session.commit()
        return user_id

    return _seed


@pytest.fixture()
def cookie_header(settings: Settings) -> Callable[..., dict[str, str]]:
    """
    Builds a Cookie header carrying a session for `user_id`.
    """

    cfg = JwtConfig(alg=settings.jwt_alg, audience=settings.jwt_audience, secret=JWT_SECRET)

    def _cookies(
        user_id: str,
        *,
        email: str | None = None,
        ttl: timedelta = timedelta(hours=1),
        refresh_token: str | None = None,
    ) -> dict[str, str]:
        access = issue_token(cfg=cfg, subject=user_id, email=email, ttl=ttl)
        parts = [f"{settings.cookie_prefix}-access-token={access}"]
        if refresh_token:
            parts.append(f"{settings.cookie_prefix}-refresh-token={refresh_token}")
        return {"Cookie": "; ".join(parts)}

    return _cookies
