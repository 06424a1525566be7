"""Project service.

Listing is org-wide; reading and editing a single project requires the
caller to be one of its members.
"""

import uuid
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from productiveflow.auth.dependencies import OrgContext
from productiveflow.db.models import Project, User
from productiveflow.services.errors import NotFoundError
from productiveflow.services.scoping import member_project_ids


class ProjectService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_projects(self, ctx: OrgContext) -> list[Project]:
        result = await self.db.execute(
            select(Project)
            .where(Project.org_id == ctx.org_id)
            .options(selectinload(Project.teams))
            .order_by(Project.name)
        )
        return list(result.scalars().all())

    async def get_project(self, ctx: OrgContext, project_id: uuid.UUID) -> Optional[Project]:
        result = await self.db.execute(
            select(Project)
            .where(
                Project.id == project_id,
                Project.org_id == ctx.org_id,
                Project.id.in_(member_project_ids(ctx.user_id)),
            )
            .options(selectinload(Project.users))
            .execution_options(populate_existing=True)
        )
        return result.scalars().first()

    async def get_org_project(self, ctx: OrgContext, project_id: uuid.UUID) -> Project:
        """Any project in the caller's org (membership not required)."""
        result = await self.db.execute(
            select(Project).where(
                Project.id == project_id, Project.org_id == ctx.org_id
            )
        )
        project = result.scalars().first()
        if project is None:
            raise NotFoundError("Project not found")
        return project

    async def create_project(self, ctx: OrgContext, **fields: Any) -> Project:
        """Create a project in the caller's org with the caller as first member."""
        creator = await self.db.get(User, ctx.user_id)
        project = Project(org_id=ctx.org_id, users=[creator], **fields)
        self.db.add(project)
        await self.db.commit()
        return await self.get_project(ctx, project.id)

    async def update_project(
        self, ctx: OrgContext, project_id: uuid.UUID, changes: dict[str, Any]
    ) -> Project:
        project = await self.get_project(ctx, project_id)
        if project is None:
            raise NotFoundError("Project not found")
        for field, value in changes.items():
            if value is not None:
                setattr(project, field, value)
        await self.db.commit()
        return await self.get_project(ctx, project_id)
