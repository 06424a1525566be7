"""Session cookie accessor.

The session lives in a single HttpOnly, SameSite=Lax cookie holding a
signed token from auth.tokens. Nothing is stored server-side; signing out
just deletes the cookie.

Lifetimes:
- sign-in, remember=False → 24 hours
- sign-in, remember=True  → 30 days
- sign-up (remember=None) → 24 hours
The token's exp always matches the cookie Max-Age.
"""

import uuid
from datetime import timedelta
from typing import Any, Optional

import structlog
from fastapi import Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from productiveflow.auth.tokens import (
    SessionClaims,
    SessionUser,
    TokenError,
    issue_token,
    verify_token,
)
from productiveflow.config import settings
from productiveflow.db.models import User

logger = structlog.get_logger()


def session_ttl(remember: Optional[bool] = None) -> timedelta:
    if remember:
        return timedelta(days=settings.remember_me_ttl_days)
    return timedelta(hours=settings.session_ttl_hours)


def create_session(
    response: Response, user: Any, remember: Optional[bool] = None
) -> str:
    """Issue a token for `user` and attach it to `response` as the session cookie."""
    claims = user if isinstance(user, SessionUser) else SessionUser.from_user(user)
    ttl = session_ttl(remember)
    token = issue_token(claims, ttl)
    response.set_cookie(
        settings.session_cookie_name,
        token,
        max_age=int(ttl.total_seconds()),
        path="/",
        httponly=True,
        secure=settings.secure_cookies,
        samesite="lax",
    )
    return token


def read_session_claims(request: Request) -> Optional[SessionClaims]:
    """Verified token claims from the cookie, or None. Never raises."""
    token = request.cookies.get(settings.session_cookie_name)
    if not token:
        return None
    try:
        return verify_token(token)
    except TokenError:
        return None


async def get_session(request: Request, db: AsyncSession) -> Optional[User]:
    """The caller's current User row, or None.

    Token claims only supply the user id; org and role come from the row
    so downgrades take effect on the next request, not at token expiry.
    A token whose user has been deleted counts as no session.
    """
    claims = read_session_claims(request)
    if claims is None:
        return None
    try:
        user_id = uuid.UUID(claims.user.id)
    except ValueError:
        return None

    user = await db.get(User, user_id)
    if user is None:
        logger.info("auth.stale_session", user_id=claims.user.id)
    return user


def clear_session(response: Response) -> None:
    """Delete the session cookie. Safe to call when none is set."""
    response.delete_cookie(
        settings.session_cookie_name,
        path="/",
        httponly=True,
        secure=settings.secure_cookies,
        samesite="lax",
    )
