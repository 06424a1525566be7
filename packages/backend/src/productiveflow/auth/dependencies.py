"""FastAPI auth dependencies for API routes.

API callers are not browsers following redirects, so these answer with
JSON errors instead:
- api_identity  → 401 when there is no valid session
- org_member    → 403 when the caller has no organization yet
- require_role  → 403 when the caller's org role is not allowed

Routers apply them at include_router level (see api/__init__.py), so no
handler re-implements the session check inline.
"""

import uuid
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException

from productiveflow.auth.identity import ResolvedIdentity, auth


@dataclass(frozen=True)
class OrgContext:
    """An authenticated caller known to belong to an organization.

    Services take this instead of raw ids so every query can be scoped to
    org_id without re-checking membership.
    """

    identity: ResolvedIdentity
    org_id: uuid.UUID
    user_id: uuid.UUID

    @property
    def role(self) -> str:
        return self.identity.role


async def api_identity(
    identity: Optional[ResolvedIdentity] = Depends(auth),
) -> ResolvedIdentity:
    if identity is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return identity


async def org_member(
    identity: ResolvedIdentity = Depends(api_identity),
) -> OrgContext:
    if identity.org_id is None:
        raise HTTPException(status_code=403, detail="Organization required")
    return OrgContext(
        identity=identity,
        org_id=uuid.UUID(identity.org_id),
        user_id=uuid.UUID(identity.id),
    )


def require_role(*roles: str):
    """Dependency factory: org role must be one of `roles`."""

    async def _check(ctx: OrgContext = Depends(org_member)) -> OrgContext:
        if ctx.role not in roles:
            raise HTTPException(status_code=403, detail="Forbidden")
        return ctx

    return _check
