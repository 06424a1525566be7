"""Organization routes.

Learn: Mounted with api_identity, not org_member: a freshly signed-up
user has no organization yet and these are the routes that give them one.
"""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from productiveflow.auth.dependencies import api_identity
from productiveflow.auth.identity import ResolvedIdentity
from productiveflow.db.engine import get_db
from productiveflow.schemas.organization import OrgCreate, OrgDetail, OrgRead
from productiveflow.services.organization_service import OrganizationService

router = APIRouter(prefix="/organizations")


def _svc(db: AsyncSession = Depends(get_db)) -> OrganizationService:
    return OrganizationService(db)


@router.post("", response_model=OrgRead, status_code=201)
async def create_organization(
    body: OrgCreate,
    identity: ResolvedIdentity = Depends(api_identity),
    svc: OrganizationService = Depends(_svc),
):
    """Create an org and move the caller into it as ADMIN."""
    return await svc.create_for_user(uuid.UUID(identity.id), body.name)


@router.get("", response_model=Optional[OrgDetail])
async def get_organization(
    identity: ResolvedIdentity = Depends(api_identity),
    svc: OrganizationService = Depends(_svc),
):
    """The caller's org with its users and projects, or null."""
    org_id = uuid.UUID(identity.org_id) if identity.org_id else None
    return await svc.get_detail(org_id)
