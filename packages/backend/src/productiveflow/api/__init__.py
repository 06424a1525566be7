"""API route aggregation.

All routers registered here get mounted in main.py under /api.

Learn: Auth is applied at the include_router level using FastAPI's
dependencies parameter, so no handler re-implements the session check.
Three tiers:
- open: health, auth (sign-in has to work without a session)
- identity: organizations, user profile (a caller without an org must
  be able to create one and edit their own profile)
- org member: everything scoped to an organization
"""

from fastapi import APIRouter, Depends

from productiveflow.api.auth import router as auth_router
from productiveflow.api.dashboard import router as dashboard_router
from productiveflow.api.health import router as health_router
from productiveflow.api.organizations import router as organizations_router
from productiveflow.api.profile import router as profile_router
from productiveflow.api.projects import router as projects_router
from productiveflow.api.tags import router as tags_router
from productiveflow.api.tasks import router as tasks_router
from productiveflow.api.teams import router as teams_router
from productiveflow.api.time_entries import router as time_entries_router
from productiveflow.api.users import router as users_router
from productiveflow.auth.dependencies import api_identity, org_member

_identity = [Depends(api_identity)]
_org = [Depends(org_member)]

api_router = APIRouter(prefix="/api")

# Open routes
api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])

# Signed in, organization optional
api_router.include_router(organizations_router, tags=["organizations"], dependencies=_identity)
api_router.include_router(profile_router, tags=["profile"], dependencies=_identity)

# Signed in and inside an organization
api_router.include_router(projects_router, tags=["projects"], dependencies=_org)
api_router.include_router(tasks_router, tags=["tasks"], dependencies=_org)
api_router.include_router(tags_router, tags=["tags"], dependencies=_org)
api_router.include_router(teams_router, tags=["teams"], dependencies=_org)
api_router.include_router(time_entries_router, tags=["time-entries"], dependencies=_org)
api_router.include_router(users_router, tags=["users"], dependencies=_org)
api_router.include_router(dashboard_router, tags=["dashboard", "analytics"], dependencies=_org)
