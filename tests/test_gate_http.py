"""
tests.test_gate_http

End-to-end admin gate behavior through the ASGI app.

Responsibilities:
- Redirect targets and messages for anonymous, non-admin and admin visitors.
- Rotated session cookies on redirects and on allowed responses.
- Degradation to the auth-error redirect when the admin lookup fails.
"""

from __future__ import annotations

from datetime import timedelta

import pytest

from slambase_admin.auth.gate import AdminGate
from slambase_admin.auth.session import SessionResolver

LOGIN_REQUIRED = "/admin/login?message=Please%20login%20to%20access%20admin%20dashboard"
ADMIN_REQUIRED = "/admin/login?message=Admin%20access%20required"
AUTH_ERROR = "/admin/login?message=Authentication%20error%20occurred"


class BrokenLookup:
    async def find_admin(self, identity_id: str):
        raise ConnectionError("admin_users unreachable")


@pytest.mark.asyncio
async def test_public_paths_bypass_the_gate(client, platform) -> None:
    r = await client.get("/healthz")
    assert r.status_code == 200
    # Prefix match is on path segments.
    r = await client.get("/administrator")
    assert r.status_code == 404
    assert platform.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize("path", ["/admin", "/admin/dashboard", "/admin/wrestlers/3/edit"])
async def test_anonymous_is_sent_to_login(client, path: str) -> None:
    r = await client.get(path)
    assert r.status_code == 303
    assert r.headers["location"] == LOGIN_REQUIRED


@pytest.mark.asyncio
async def test_non_admin_is_sent_to_login_with_admin_message(client, cookie_header) -> None:
    r = await client.get("/admin/dashboard", headers=cookie_header("u-fan"))
    assert r.status_code == 303
    assert r.headers["location"] == ADMIN_REQUIRED


@pytest.mark.asyncio
async def test_login_screen_is_open_to_anonymous_and_non_admins(client, cookie_header) -> None:
    r = await client.get("/admin/login", params={"message": "Admin access required"})
    assert r.status_code == 200
    assert r.json()["notice"] == {"title": "Access Denied", "description": "Admin access required"}

    r = await client.get("/admin/login", headers=cookie_header("u-fan"))
    assert r.status_code == 200
    assert r.json()["notice"] is None


@pytest.mark.asyncio
async def test_admin_on_login_goes_to_dashboard(client, seed_admin, cookie_header) -> None:
    admin_id = await seed_admin()
    r = await client.get("/admin/login", headers=cookie_header(admin_id))
    assert r.status_code == 303
    assert r.headers["location"] == "/admin/dashboard"


@pytest.mark.asyncio
async def test_admin_reaches_dashboard(client, seed_admin, cookie_header) -> None:
    admin_id = await seed_admin(email="gm@slambase.test")
    r = await client.get("/admin/dashboard", headers=cookie_header(admin_id))

    assert r.status_code == 200
    assert r.json()["admin"] == {
        "id": admin_id,
        "email": "gm@slambase.test",
        "role": "editor",
        "role_label": "Editor",
    }
    assert "x-request-id" in r.headers


@pytest.mark.asyncio
async def test_expired_admin_session_is_rotated_once(
    client, platform, seed_admin, cookie_header
) -> None:
    admin_id = await seed_admin()
    refresh = platform.issue_session(admin_id)["refresh_token"]
    headers = cookie_header(admin_id, ttl=timedelta(seconds=-30), refresh_token=refresh)

    r = await client.get("/admin/wrestlers", headers=headers)

    assert r.status_code == 200
    # The page guard reuses the rotated pair; a second redemption would fail.
    assert platform.calls.count(("POST", "/auth/v1/token")) == 1
    new_refresh = r.cookies.get("sb-refresh-token")
    assert new_refresh and new_refresh != refresh
    assert r.cookies.get("sb-access-token")


@pytest.mark.asyncio
async def test_rotated_cookies_ride_on_redirects(client, platform, cookie_header) -> None:
    refresh = platform.issue_session("u-fan")["refresh_token"]
    headers = cookie_header("u-fan", ttl=timedelta(seconds=-30), refresh_token=refresh)

    r = await client.get("/admin/events", headers=headers)

    assert r.status_code == 303
    assert r.headers["location"] == ADMIN_REQUIRED
    assert r.cookies.get("sb-refresh-token") not in (None, refresh)


@pytest.mark.asyncio
async def test_spent_refresh_token_is_anonymous(client, cookie_header) -> None:
    headers = cookie_header("u-1", ttl=timedelta(seconds=-30), refresh_token="rt-spent")
    r = await client.get("/admin/dashboard", headers=headers)
    assert r.status_code == 303
    assert r.headers["location"] == LOGIN_REQUIRED


@pytest.mark.asyncio
async def test_lookup_failure_redirects_with_auth_error(
    app, client, settings, seed_admin, cookie_header
) -> None:
    admin_id = await seed_admin()
    app.state.gate = AdminGate(
        resolver=SessionResolver(settings=settings, auth_api=app.state.auth_api),
        lookup=BrokenLookup(),
        timeout_seconds=settings.auth_timeout_seconds,
    )

    r = await client.get("/admin/dashboard", headers=cookie_header(admin_id))

    assert r.status_code == 303
    assert r.headers["location"] == AUTH_ERROR


@pytest.mark.asyncio
async def test_lookup_failure_on_login_serves_the_form(
    app, client, settings, cookie_header
) -> None:
    app.state.gate = AdminGate(
        resolver=SessionResolver(settings=settings, auth_api=app.state.auth_api),
        lookup=BrokenLookup(),
        timeout_seconds=settings.auth_timeout_seconds,
    )

    r = await client.get("/admin/login", headers=cookie_header("u-fan"))
    assert r.status_code == 200
    assert r.json()["screen"] == "login"

    # The error redirect target must itself render.
    r = await client.get(AUTH_ERROR, headers=cookie_header("u-fan"))
    assert r.status_code == 200
    assert r.json()["notice"]["description"] == "Authentication error occurred"


@pytest.mark.asyncio
async def test_repeated_requests_get_the_same_answer(client, cookie_header) -> None:
    headers = cookie_header("u-fan")
    first = await client.get("/admin/championships", headers=headers)
    second = await client.get("/admin/championships", headers=headers)
    assert (first.status_code, first.headers["location"]) == (
        second.status_code,
        second.headers["location"],
    )
