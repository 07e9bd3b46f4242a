"""
slambase_admin.auth.models

Auth domain models.

Responsibilities:
- Define the resolved identity, the admin record and its closed role enum.
- Define the session credential carried in cookies and the resolver result.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import assert_never


class AdminRole(enum.StrEnum):
    super_admin = "super_admin"
    editor = "editor"


def role_label(role: AdminRole) -> str:
    match role:
        case AdminRole.super_admin:
            return "Super Admin"
        case AdminRole.editor:
            return "Editor"
        case _:
            assert_never(role)


@dataclass(frozen=True, slots=True)
class Identity:
    """
    Authenticated subject resolved from a session credential.
    """

    id: str
    email: str | None = None


@dataclass(frozen=True, slots=True)
class AdminRecord:
    id: str
    role: AdminRole
    email: str | None = None

    def chrome(self) -> dict[str, str | None]:
        # What the dashboard header shows for the signed-in admin.
        return {
            "id": self.id,
            "email": self.email,
            "role": self.role.value,
            "role_label": role_label(self.role),
        }


@dataclass(frozen=True, slots=True)
class SessionCredential:
    access_token: str
    refresh_token: str | None = None


@dataclass(frozen=True, slots=True)
class SessionResult:
    identity: Identity | None = None
    # Set when the resolver rotated the credential; must be written back to the client.
    refreshed: SessionCredential | None = None
    error: str | None = None


# --- Module Notes -----------------------------------------------------------
# AdminRole values are stored in the DB; treat them as a stable contract.
