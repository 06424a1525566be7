"""Task service: CRUD for tasks inside the caller's organization.

Visibility rules:
- list: tasks assigned to the caller, or in a project the caller is a
  member of (optionally narrowed to one project)
- get / update / delete: any task whose project is in the caller's org

Every referenced project, assignee and tag is checked against the
caller's org before it is linked, so a task can never point across
tenants.
"""

import uuid
from typing import Any, Optional

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from productiveflow.auth.dependencies import OrgContext
from productiveflow.db.models import Project, Task, User
from productiveflow.services.errors import NotFoundError
from productiveflow.services.project_service import ProjectService
from productiveflow.services.scoping import member_project_ids
from productiveflow.services.tag_service import TagService

_TASK_LOADS = (
    selectinload(Task.project),
    selectinload(Task.assignee),
    selectinload(Task.tags),
)

# Columns a null in the request body must not clear.
_REQUIRED_FIELDS = {"title", "status", "priority"}


class TaskService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.projects = ProjectService(db)
        self.tags = TagService(db)

    # ─── Read ────────────────────────────────────────────

    async def list_tasks(
        self, ctx: OrgContext, project_id: Optional[uuid.UUID] = None
    ) -> list[Task]:
        query = (
            select(Task)
            .join(Task.project)
            .where(
                Project.org_id == ctx.org_id,
                or_(
                    Task.assignee_id == ctx.user_id,
                    Task.project_id.in_(member_project_ids(ctx.user_id)),
                ),
            )
            .options(*_TASK_LOADS)
            .order_by(Task.created_at.desc())
        )
        if project_id:
            query = query.where(Task.project_id == project_id)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_task(self, ctx: OrgContext, task_id: uuid.UUID) -> Optional[Task]:
        result = await self.db.execute(
            select(Task)
            .join(Task.project)
            .where(Task.id == task_id, Project.org_id == ctx.org_id)
            .options(*_TASK_LOADS)
            .execution_options(populate_existing=True)
        )
        return result.scalars().first()

    async def _require_task(self, ctx: OrgContext, task_id: uuid.UUID) -> Task:
        task = await self.get_task(ctx, task_id)
        if task is None:
            raise NotFoundError("Task not found")
        return task

    # ─── Write ───────────────────────────────────────────

    async def _check_assignee(
        self, ctx: OrgContext, assignee_id: Optional[uuid.UUID]
    ) -> None:
        if assignee_id is None:
            return
        assignee = await self.db.get(User, assignee_id)
        if assignee is None or assignee.org_id != ctx.org_id:
            raise NotFoundError("Assignee not found")

    async def create_task(
        self,
        ctx: OrgContext,
        project_id: uuid.UUID,
        title: str,
        description: Optional[str] = None,
        status: str = "TODO",
        priority: str = "MEDIUM",
        due_date=None,
        assignee_id: Optional[uuid.UUID] = None,
        tag_ids: Optional[list[uuid.UUID]] = None,
    ) -> Task:
        await self.projects.get_org_project(ctx, project_id)
        await self._check_assignee(ctx, assignee_id)
        tags = await self.tags.get_tags(ctx, tag_ids or [])

        task = Task(
            project_id=project_id,
            title=title,
            description=description,
            status=status,
            priority=priority,
            due_date=due_date,
            assignee_id=assignee_id,
            tags=tags,
        )
        self.db.add(task)
        await self.db.commit()
        return await self.get_task(ctx, task.id)

    async def update_task(
        self, ctx: OrgContext, task_id: uuid.UUID, changes: dict[str, Any]
    ) -> Task:
        """Apply `changes` (field → value). Absent keys are left alone.

        For a full replace (PUT) callers pass every field, so None clears
        nullable columns such as due_date and assignee_id.
        """
        task = await self._require_task(ctx, task_id)

        if "project_id" in changes:
            if changes["project_id"] is None:
                changes.pop("project_id")
            else:
                await self.projects.get_org_project(ctx, changes["project_id"])
        if "assignee_id" in changes:
            await self._check_assignee(ctx, changes["assignee_id"])
        if "tag_ids" in changes:
            task.tags = await self.tags.get_tags(ctx, changes.pop("tag_ids") or [])

        for field, value in changes.items():
            if value is None and field in _REQUIRED_FIELDS:
                continue
            setattr(task, field, value)

        await self.db.commit()
        return await self.get_task(ctx, task_id)

    async def delete_task(self, ctx: OrgContext, task_id: uuid.UUID) -> None:
        task = await self._require_task(ctx, task_id)
        await self.db.delete(task)
        await self.db.commit()
