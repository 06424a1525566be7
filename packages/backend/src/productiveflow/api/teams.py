"""Team routes: teams, team membership, and team/project links.

Learn: Any org member can list and create teams. Member and project
changes check the caller's *team* role (ADMIN) inside TeamService, so
an org ADMIN who is not on the team cannot reshuffle it.
"""

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from productiveflow.auth.dependencies import OrgContext, org_member
from productiveflow.db.engine import get_db
from productiveflow.schemas.team import (
    MemberAdd,
    MemberUpdate,
    ProjectAssign,
    TeamCreate,
    TeamMemberRead,
    TeamRead,
)
from productiveflow.services.team_service import TeamService

router = APIRouter(prefix="/teams")


def _svc(db: AsyncSession = Depends(get_db)) -> TeamService:
    return TeamService(db)


# ─── Teams ──────────────────────────────────────────────


@router.get("", response_model=list[TeamRead])
async def list_teams(ctx: OrgContext = Depends(org_member), svc: TeamService = Depends(_svc)):
    return await svc.list_teams(ctx)


@router.post("", response_model=TeamRead, status_code=201)
async def create_team(
    body: TeamCreate,
    ctx: OrgContext = Depends(org_member),
    svc: TeamService = Depends(_svc),
):
    return await svc.create_team(ctx, name=body.name, description=body.description)


# ─── Members ────────────────────────────────────────────


@router.post("/{team_id}/members", response_model=TeamMemberRead, status_code=201)
async def add_member(
    team_id: uuid.UUID,
    body: MemberAdd,
    ctx: OrgContext = Depends(org_member),
    svc: TeamService = Depends(_svc),
):
    return await svc.add_member(ctx, team_id, email=body.email, role=body.role)


@router.put("/{team_id}/members", response_model=TeamMemberRead)
async def update_member(
    team_id: uuid.UUID,
    body: MemberUpdate,
    ctx: OrgContext = Depends(org_member),
    svc: TeamService = Depends(_svc),
):
    return await svc.update_member(ctx, team_id, body.member_id, body.role)


@router.delete("/{team_id}/members")
async def remove_member(
    team_id: uuid.UUID,
    member_id: uuid.UUID = Query(..., alias="memberId"),
    ctx: OrgContext = Depends(org_member),
    svc: TeamService = Depends(_svc),
):
    """DELETE /teams/{id}/members?memberId=..."""
    await svc.remove_member(ctx, team_id, member_id)
    return {"deleted": True}


# ─── Projects ───────────────────────────────────────────


@router.post("/{team_id}/projects", response_model=TeamRead)
async def assign_project(
    team_id: uuid.UUID,
    body: ProjectAssign,
    ctx: OrgContext = Depends(org_member),
    svc: TeamService = Depends(_svc),
):
    return await svc.assign_project(ctx, team_id, body.project_id)


@router.delete("/{team_id}/projects/{project_id}")
async def unassign_project(
    team_id: uuid.UUID,
    project_id: uuid.UUID,
    ctx: OrgContext = Depends(org_member),
    svc: TeamService = Depends(_svc),
):
    await svc.unassign_project(ctx, team_id, project_id)
    return {"deleted": True}
