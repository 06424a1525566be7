"""Project routes. Listing is org-wide; single-project access needs membership."""

import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from productiveflow.auth.dependencies import OrgContext, org_member
from productiveflow.db.engine import get_db
from productiveflow.schemas.project import (
    ProjectCreate,
    ProjectListItem,
    ProjectRead,
    ProjectUpdate,
)
from productiveflow.services.project_service import ProjectService

router = APIRouter(prefix="/projects")


def _svc(db: AsyncSession = Depends(get_db)) -> ProjectService:
    return ProjectService(db)


@router.get("", response_model=list[ProjectListItem])
async def list_projects(
    ctx: OrgContext = Depends(org_member), svc: ProjectService = Depends(_svc)
):
    return await svc.list_projects(ctx)


@router.post("", response_model=ProjectRead, status_code=201)
async def create_project(
    body: ProjectCreate,
    ctx: OrgContext = Depends(org_member),
    svc: ProjectService = Depends(_svc),
):
    return await svc.create_project(ctx, **body.model_dump())


@router.get("/{project_id}", response_model=ProjectRead)
async def get_project(
    project_id: uuid.UUID,
    ctx: OrgContext = Depends(org_member),
    svc: ProjectService = Depends(_svc),
):
    project = await svc.get_project(ctx, project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


@router.patch("/{project_id}", response_model=ProjectRead)
async def update_project(
    project_id: uuid.UUID,
    body: ProjectUpdate,
    ctx: OrgContext = Depends(org_member),
    svc: ProjectService = Depends(_svc),
):
    return await svc.update_project(ctx, project_id, body.model_dump(exclude_unset=True))
