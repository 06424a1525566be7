"""Page gatekeeper and organization guard.

The gatekeeper is attached to page routers with include_router(...,
dependencies=[Depends(page_gatekeeper)]); every protected page therefore
runs it before its handler. Its outcome is always one of: proceed, or
redirect. It never raises a 401 and nothing escapes to an error page.

The organization guard is a pure function so it can be reused (and
tested) without a request.
"""

from typing import Optional

import structlog
from fastapi import Depends, Request

from productiveflow.auth.identity import (
    ORG_CREATION_PATH,
    SIGN_IN_PATH,
    RedirectRequired,
    ResolvedIdentity,
    auth,
)
from productiveflow.config import settings

logger = structlog.get_logger()


def organization_guard(
    identity: Optional[ResolvedIdentity], path: str
) -> Optional[str]:
    """Return a redirect target, or None to let the request through.

    No identity → None (no verdict; the caller decides).
    Identity without an org → the org-creation page, unless already there.
    """
    if identity is None:
        return None
    if identity.org_id is None and not path.startswith(ORG_CREATION_PATH):
        return ORG_CREATION_PATH
    return None


async def page_gatekeeper(
    request: Request, identity: Optional[ResolvedIdentity] = Depends(auth)
) -> ResolvedIdentity:
    """First-line check for protected pages.

    1. no cookie                  → sign-in
    2. bad/expired token, or the
       token's user is gone       → sign-in (cookie cleared)
    3. valid                      → organization guard

    Learn: `auth` is cached per request, so handlers that also depend on
    it (directly or through require_auth) reuse this lookup.
    """
    path = request.url.path
    if settings.session_cookie_name not in request.cookies:
        raise RedirectRequired(SIGN_IN_PATH)

    if identity is None:
        logger.info("auth.gate_rejected", path=path)
        raise RedirectRequired(SIGN_IN_PATH, clear_session=True)

    target = organization_guard(identity, path)
    if target is not None:
        logger.info("auth.org_required", user_id=identity.id, path=path)
        raise RedirectRequired(target)
    return identity
