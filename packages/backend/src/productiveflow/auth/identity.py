"""Identity resolution: who is calling, right now.

ResolvedIdentity is rebuilt on every request from the User row that
session.get_session re-reads; it is never cached across requests.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from productiveflow.auth.session import get_session
from productiveflow.db.engine import get_db
from productiveflow.db.models import User

SIGN_IN_PATH = "/auth/signin"
ORG_CREATION_PATH = "/dashboard/organization/new"


class RedirectRequired(Exception):
    """Raised by page dependencies; create_app() turns it into a 307."""

    def __init__(self, location: str, clear_session: bool = False):
        super().__init__(location)
        self.location = location
        self.clear_session = clear_session


@dataclass(frozen=True)
class ResolvedIdentity:
    id: str
    email: str
    name: Optional[str]
    org_id: Optional[str]
    role: str  # ADMIN, MEMBER, VIEWER

    @classmethod
    def from_user(cls, user: User) -> "ResolvedIdentity":
        return cls(
            id=str(user.id),
            email=user.email,
            name=user.name,
            org_id=str(user.org_id) if user.org_id else None,
            role=user.role,
        )

    @property
    def has_org(self) -> bool:
        return self.org_id is not None

    def to_public(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "orgId": self.org_id,
            "role": self.role,
        }


async def auth(
    request: Request, db: AsyncSession = Depends(get_db)
) -> Optional[ResolvedIdentity]:
    """Soft dependency: the caller's identity, or None."""
    user = await get_session(request, db)
    if user is None:
        return None
    return ResolvedIdentity.from_user(user)


async def require_auth(
    identity: Optional[ResolvedIdentity] = Depends(auth),
) -> ResolvedIdentity:
    """Hard dependency for pages: redirect to sign-in when anonymous."""
    if identity is None:
        raise RedirectRequired(SIGN_IN_PATH)
    return identity
