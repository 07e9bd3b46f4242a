"""
tests.test_page_guard

Page-level guard (second enforcement point).
"""

from __future__ import annotations

import asyncio

import pytest

from slambase_admin.auth.deps import GuardState, PageGuard
from slambase_admin.auth.gate import Decision, GateResult
from slambase_admin.auth.models import AdminRecord, AdminRole, SessionCredential

ADMIN = AdminRecord(id="u-7", role=AdminRole.super_admin, email="gm@slambase.test")


class FakeGate:
    def __init__(self, result: GateResult) -> None:
        self.result = result
        self.release = asyncio.Event()
        self.release.set()
        self.calls = 0

    async def evaluate(self, path: str, credential: SessionCredential | None) -> GateResult:
        self.calls += 1
        await self.release.wait()
        return self.result


def _guard(gate: FakeGate) -> PageGuard:
    return PageGuard(gate=gate, path="/admin/dashboard", credential=None)  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_guard_allows_admin_and_exposes_record() -> None:
    guard = _guard(FakeGate(GateResult(decision=Decision.allow(), admin=ADMIN)))
    assert guard.state is GuardState.pending

    assert await guard.run() is GuardState.allowed
    assert guard.admin == ADMIN
    assert guard.redirect_to is None


@pytest.mark.asyncio
async def test_guard_redirects_when_denied() -> None:
    denied = Decision.to_login("Admin access required")
    guard = _guard(FakeGate(GateResult(decision=denied)))

    assert await guard.run() is GuardState.redirecting
    assert guard.redirect_to == "/admin/login?message=Admin%20access%20required"
    assert guard.admin is None


@pytest.mark.asyncio
async def test_guard_runs_once() -> None:
    gate = FakeGate(GateResult(decision=Decision.allow(), admin=ADMIN))
    guard = _guard(gate)
    await guard.run()
    await guard.run()
    assert gate.calls == 1


@pytest.mark.asyncio
async def test_closed_guard_ignores_late_result() -> None:
    gate = FakeGate(GateResult(decision=Decision.allow(), admin=ADMIN))
    gate.release.clear()
    guard = _guard(gate)

    task = asyncio.create_task(guard.run())
    await asyncio.sleep(0)
    guard.close()
    gate.release.set()

    assert await task is GuardState.pending
    assert guard.closed
    assert guard.admin is None
