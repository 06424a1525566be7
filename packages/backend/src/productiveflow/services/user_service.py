"""User service: accounts, credentials, profile and preferences.

Sign-in and sign-up live here rather than in the route so the CLI and
tests can reuse them. Session cookies are the route's concern.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from productiveflow.auth.dependencies import OrgContext
from productiveflow.auth.password import (
    hash_password,
    hash_reset_token,
    new_reset_token,
    verify_password,
    verify_password_timing_safe,
)
from productiveflow.config import settings
from productiveflow.db.models import User, ensure_utc
from productiveflow.services.errors import (
    ConflictError,
    NotFoundError,
    ValidationFailedError,
)

logger = structlog.get_logger()


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(
            select(User).where(func.lower(User.email) == normalize_email(email))
        )
        return result.scalars().first()

    async def get(self, user_id: uuid.UUID) -> Optional[User]:
        return await self.db.get(User, user_id)

    # ─── Credentials ────────────────────────────────────

    async def authenticate(self, email: str, password: str) -> Optional[User]:
        """Return the user for valid credentials, else None."""
        user = await self.get_by_email(email)
        hashed = user.password_hash if user else None
        if not verify_password_timing_safe(password, hashed):
            return None
        return user

    async def register(self, name: str, email: str, password: str) -> User:
        if await self.get_by_email(email):
            raise ConflictError("Email already registered")
        user = User(
            name=name,
            email=normalize_email(email),
            password_hash=hash_password(password),
        )
        self.db.add(user)
        await self.db.commit()
        return user

    async def request_password_reset(self, email: str) -> Optional[str]:
        """Store a one-time reset token for `email`; return it, or None if unknown."""
        user = await self.get_by_email(email)
        if user is None:
            return None
        token, digest = new_reset_token()
        user.reset_token_hash = digest
        user.reset_token_expires_at = datetime.now(timezone.utc) + timedelta(
            minutes=settings.password_reset_ttl_minutes
        )
        await self.db.commit()
        logger.info("auth.reset_requested", user_id=str(user.id))
        return token

    async def confirm_password_reset(self, token: str, new_password: str) -> User:
        result = await self.db.execute(
            select(User).where(User.reset_token_hash == hash_reset_token(token))
        )
        user = result.scalars().first()
        expires = ensure_utc(user.reset_token_expires_at) if user else None
        if user is None or expires is None or expires <= datetime.now(timezone.utc):
            raise ValidationFailedError("Invalid or expired reset token")

        user.password_hash = hash_password(new_password)
        user.reset_token_hash = None
        user.reset_token_expires_at = None
        await self.db.commit()
        logger.info("auth.password_reset", user_id=str(user.id))
        return user

    # ─── Profile ────────────────────────────────────────

    async def update_profile(
        self,
        user_id: uuid.UUID,
        name: Optional[str] = None,
        email: Optional[str] = None,
        current_password: Optional[str] = None,
        new_password: Optional[str] = None,
    ) -> User:
        user = await self.get(user_id)
        if user is None:
            raise NotFoundError("User not found")

        if new_password:
            if not current_password:
                raise ValidationFailedError("Current password is required")
            if not verify_password(current_password, user.password_hash):
                raise ValidationFailedError("Current password is incorrect")
            user.password_hash = hash_password(new_password)

        if email is not None and normalize_email(email) != user.email:
            if await self.get_by_email(email):
                raise ConflictError("Email already in use")
            user.email = normalize_email(email)
        if name is not None:
            user.name = name

        await self.db.commit()
        return user

    async def update_theme(self, user_id: uuid.UUID, theme: str, accent_color: str) -> User:
        user = await self.get(user_id)
        if user is None:
            raise NotFoundError("User not found")
        user.theme = theme
        user.accent_color = accent_color
        await self.db.commit()
        return user

    # ─── Organization members ───────────────────────────

    async def list_org_users(self, ctx: OrgContext) -> list[User]:
        result = await self.db.execute(
            select(User).where(User.org_id == ctx.org_id).order_by(User.email)
        )
        return list(result.scalars().all())

    async def create_org_user(
        self, ctx: OrgContext, email: str, name: str, password: str, role: str
    ) -> User:
        if await self.get_by_email(email):
            raise ConflictError("Email already in use")
        user = User(
            email=normalize_email(email),
            name=name,
            password_hash=hash_password(password),
            role=role,
            org_id=ctx.org_id,
        )
        self.db.add(user)
        await self.db.commit()
        logger.info("org.user_created", org_id=str(ctx.org_id), user_id=str(user.id))
        return user
