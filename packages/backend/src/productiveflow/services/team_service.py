"""Team service: teams, memberships and team/project links.

Any org member may create a team and becomes its ADMIN. Membership and
project assignment changes require the caller to be an ADMIN of that
team (team role, independent of the org-level role).
"""

import uuid

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from productiveflow.auth.dependencies import OrgContext
from productiveflow.db.models import Project, Team, TeamMember
from productiveflow.services.errors import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
)
from productiveflow.services.project_service import ProjectService
from productiveflow.services.user_service import UserService

logger = structlog.get_logger()


class TeamService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.projects = ProjectService(db)
        self.users = UserService(db)

    # ─── Teams ──────────────────────────────────────────

    async def list_teams(self, ctx: OrgContext) -> list[Team]:
        result = await self.db.execute(
            select(Team)
            .where(Team.org_id == ctx.org_id)
            .options(
                selectinload(Team.members).selectinload(TeamMember.user),
                selectinload(Team.projects).selectinload(Project.tasks),
            )
            .order_by(Team.name)
        )
        return list(result.scalars().all())

    async def get_team(self, ctx: OrgContext, team_id: uuid.UUID) -> Team | None:
        result = await self.db.execute(
            select(Team)
            .where(Team.id == team_id, Team.org_id == ctx.org_id)
            .options(
                selectinload(Team.members).selectinload(TeamMember.user),
                selectinload(Team.projects).selectinload(Project.tasks),
            )
            .execution_options(populate_existing=True)
        )
        return result.scalars().first()

    async def create_team(
        self, ctx: OrgContext, name: str, description: str | None = None
    ) -> Team:
        """Create a team with the caller as its first ADMIN member."""
        team = Team(org_id=ctx.org_id, name=name, description=description)
        self.db.add(team)
        await self.db.flush()

        self.db.add(TeamMember(team_id=team.id, user_id=ctx.user_id, role="ADMIN"))
        await self.db.commit()

        logger.info("team.created", team_id=str(team.id), org_id=str(ctx.org_id))
        return await self.get_team(ctx, team.id)

    async def _require_admin(self, ctx: OrgContext, team_id: uuid.UUID) -> Team:
        team = await self.get_team(ctx, team_id)
        if team is None:
            raise NotFoundError("Team not found")
        is_admin = any(
            m.user_id == ctx.user_id and m.role == "ADMIN" for m in team.members
        )
        if not is_admin:
            raise PermissionDeniedError("Team admin role required")
        return team

    # ─── Members ────────────────────────────────────────

    async def _get_member(self, team_id: uuid.UUID, member_id: uuid.UUID) -> TeamMember:
        result = await self.db.execute(
            select(TeamMember)
            .where(TeamMember.id == member_id, TeamMember.team_id == team_id)
            .options(selectinload(TeamMember.user))
            .execution_options(populate_existing=True)
        )
        member = result.scalars().first()
        if member is None:
            raise NotFoundError("Team member not found")
        return member

    async def add_member(
        self, ctx: OrgContext, team_id: uuid.UUID, email: str, role: str = "MEMBER"
    ) -> TeamMember:
        team = await self._require_admin(ctx, team_id)

        user = await self.users.get_by_email(email)
        if user is None or user.org_id != ctx.org_id:
            raise NotFoundError("User not found")
        if any(m.user_id == user.id for m in team.members):
            raise ConflictError("User is already a team member")

        member = TeamMember(team_id=team_id, user_id=user.id, role=role)
        self.db.add(member)
        await self.db.commit()
        return await self._get_member(team_id, member.id)

    async def update_member(
        self, ctx: OrgContext, team_id: uuid.UUID, member_id: uuid.UUID, role: str
    ) -> TeamMember:
        await self._require_admin(ctx, team_id)
        member = await self._get_member(team_id, member_id)
        member.role = role
        await self.db.commit()
        return member

    async def remove_member(
        self, ctx: OrgContext, team_id: uuid.UUID, member_id: uuid.UUID
    ) -> None:
        await self._require_admin(ctx, team_id)
        member = await self._get_member(team_id, member_id)
        await self.db.delete(member)
        await self.db.commit()

    # ─── Projects ───────────────────────────────────────

    async def assign_project(
        self, ctx: OrgContext, team_id: uuid.UUID, project_id: uuid.UUID
    ) -> Team:
        team = await self._require_admin(ctx, team_id)
        project = await self.projects.get_org_project(ctx, project_id)
        if all(p.id != project.id for p in team.projects):
            team.projects.append(project)
            await self.db.commit()
        return await self.get_team(ctx, team_id)

    async def unassign_project(
        self, ctx: OrgContext, team_id: uuid.UUID, project_id: uuid.UUID
    ) -> None:
        team = await self._require_admin(ctx, team_id)
        team.projects = [p for p in team.projects if p.id != project_id]
        await self.db.commit()

