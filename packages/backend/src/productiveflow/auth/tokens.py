"""Signed session tokens (HS256 JWT).

Claims shape:
    {"sub": <user id>, "user": {"id", "email", "name", "orgId"}, "iat", "exp"}

Verification collapses every failure (bad signature, malformed payload,
missing claims, expiry) into one TokenError with one message, so callers
cannot tell a forged token from an expired one.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import jwt
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from productiveflow.config import settings


class TokenError(Exception):
    """Raised when a session token cannot be trusted."""

    def __init__(self, message: str = "Invalid session token"):
        super().__init__(message)


class SessionUser(BaseModel):
    """The `user` claim embedded in a session token."""

    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    org_id: Optional[str] = Field(default=None, alias="orgId")

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @classmethod
    def from_user(cls, user: Any) -> "SessionUser":
        """Build claims from a User row (or anything shaped like one)."""
        org_id = getattr(user, "org_id", None)
        return cls(
            id=str(user.id),
            email=user.email,
            name=user.name,
            org_id=str(org_id) if org_id else None,
        )

    def to_claim(self) -> dict:
        return self.model_dump(by_alias=True)


class SessionClaims(BaseModel):
    """A verified token payload."""

    user: SessionUser
    issued_at: datetime
    expires_at: datetime


def _now(now: Optional[datetime]) -> datetime:
    return now or datetime.now(timezone.utc)


def issue_token(
    user: SessionUser,
    ttl: timedelta,
    *,
    secret: Optional[str] = None,
    now: Optional[datetime] = None,
) -> str:
    """Sign a session token for `user`, valid for `ttl` from `now`."""
    issued = _now(now)
    payload = {
        "sub": user.id,
        "user": user.to_claim(),
        "iat": issued,
        "exp": issued + ttl,
    }
    return jwt.encode(
        payload,
        secret or settings.session_secret,
        algorithm=settings.session_algorithm,
    )


def verify_token(
    token: str,
    *,
    secret: Optional[str] = None,
    now: Optional[datetime] = None,
) -> SessionClaims:
    """Verify signature and expiry; return the embedded claims.

    A token is expired from the instant `exp` onward.
    """
    try:
        payload = jwt.decode(
            token,
            secret or settings.session_secret,
            algorithms=[settings.session_algorithm],
            options={
                "require": ["exp", "iat", "sub"],
                "verify_exp": False,  # checked below against the caller's clock
                "verify_iat": False,
            },
        )
        claims = SessionClaims(
            user=SessionUser.model_validate(payload["user"]),
            issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
    except (
        jwt.InvalidTokenError,
        KeyError,
        TypeError,
        ValueError,
        OverflowError,
        OSError,
        ValidationError,
    ):
        raise TokenError()

    if claims.user.id != payload["sub"]:
        raise TokenError()
    if _now(now) >= claims.expires_at:
        raise TokenError()
    return claims
