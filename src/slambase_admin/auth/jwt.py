"""
slambase_admin.auth.jwt

Access-token helpers.

Responsibilities:
- Decode and validate platform-issued access tokens (HS256, aud=authenticated).
- Issue tokens in the same shape for local development and tests.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from jwt import ExpiredSignatureError, InvalidTokenError


@dataclass(frozen=True, slots=True)
class JwtConfig:
    alg: str
    audience: str
    secret: str


class JwtValidationError(Exception):
    pass


class JwtExpiredError(JwtValidationError):
    pass


def issue_token(
    *,
    cfg: JwtConfig,
    subject: str,
    email: str | None = None,
    ttl: timedelta = timedelta(hours=1),
) -> str:
    now = datetime.now(tz=UTC)
    payload: dict[str, Any] = {
        "aud": cfg.audience,
        "sub": subject,
        "email": email,
        "role": "authenticated",
        "iat": int(now.timestamp()),
        "exp": int((now + ttl).timestamp()),
    }
    return jwt.encode(payload, cfg.secret, algorithm=cfg.alg)


def decode_and_validate(*, cfg: JwtConfig, token: str) -> dict[str, Any]:
    try:
        return jwt.decode(
            token,
            cfg.secret,
            algorithms=[cfg.alg],
            audience=cfg.audience,
            options={"require": ["exp", "sub", "aud"]},
        )
    except ExpiredSignatureError as e:
        # Callers refresh on expiry, so keep it distinguishable from a bad token.
        raise JwtExpiredError(str(e)) from e
    except InvalidTokenError as e:
        raise JwtValidationError(str(e)) from e


# --- Module Notes -----------------------------------------------------------
# Token issuing is used by tests and local seeding only; production tokens come
# from the platform auth API (`platform.auth_api`).
