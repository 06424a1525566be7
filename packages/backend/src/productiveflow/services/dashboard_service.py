"""Dashboard and analytics aggregation.

The reductions (status/priority histograms, overdue and due-this-week
counts, project progress) are plain functions over loaded rows so they
can be tested without a database. DashboardService only fetches.

Weeks run Sunday 00:00 through Saturday 23:59:59.999999, in UTC.
"""

import math
import uuid
from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from productiveflow.auth.dependencies import OrgContext
from productiveflow.db.models import (
    Project,
    Task,
    Team,
    TeamMember,
    TimeEntry,
    User,
    ensure_utc,
)
from productiveflow.services.scoping import member_project_ids

RECENT_LIMIT = 5


# ═══════════════════════════════════════════════════════════
# Pure reductions
# ═══════════════════════════════════════════════════════════


def week_bounds(now: datetime) -> tuple[datetime, datetime]:
    days_since_sunday = (now.weekday() + 1) % 7
    start = (now - timedelta(days=days_since_sunday)).replace(
        hour=0, minute=0, second=0, microsecond=0
    )
    end = start + timedelta(days=7) - timedelta(microseconds=1)
    return start, end


def is_overdue(task: Task, now: datetime) -> bool:
    due = ensure_utc(task.due_date)
    return due is not None and due < now and task.status != "COMPLETED"


def is_due_between(task: Task, start: datetime, end: datetime) -> bool:
    due = ensure_utc(task.due_date)
    return due is not None and start <= due <= end


def summarize_tasks(tasks: Iterable[Task], now: datetime) -> dict:
    tasks = list(tasks)
    week_start, week_end = week_bounds(now)
    return {
        "total": len(tasks),
        "by_status": dict(Counter(t.status for t in tasks)),
        "by_priority": dict(Counter(t.priority for t in tasks)),
        "overdue": sum(1 for t in tasks if is_overdue(t, now)),
        "due_this_week": sum(1 for t in tasks if is_due_between(t, week_start, week_end)),
    }


def project_progress(tasks: Iterable[Task]) -> int:
    """Percent of tasks COMPLETED, rounded half up; 0 for an empty project."""
    tasks = list(tasks)
    if not tasks:
        return 0
    completed = sum(1 for t in tasks if t.status == "COMPLETED")
    return math.floor(completed * 100 / len(tasks) + 0.5)


def display_name(user: User) -> str:
    return user.name or user.email or "Unknown User"


# ═══════════════════════════════════════════════════════════
# Service
# ═══════════════════════════════════════════════════════════


class DashboardService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _visible_tasks(self, ctx: OrgContext) -> list[Task]:
        result = await self.db.execute(
            select(Task)
            .join(Task.project)
            .where(
                Project.org_id == ctx.org_id,
                or_(
                    Task.assignee_id == ctx.user_id,
                    Task.project_id.in_(member_project_ids(ctx.user_id)),
                ),
            )
        )
        return list(result.scalars().all())

    async def _member_projects(self, ctx: OrgContext) -> list[Project]:
        result = await self.db.execute(
            select(Project)
            .where(
                Project.org_id == ctx.org_id,
                Project.id.in_(member_project_ids(ctx.user_id)),
            )
            .options(selectinload(Project.tasks))
            .order_by(Project.updated_at.desc())
        )
        return list(result.scalars().all())

    async def _recent_activity(self, ctx: OrgContext) -> list[TimeEntry]:
        result = await self.db.execute(
            select(TimeEntry)
            .where(TimeEntry.project_id.in_(member_project_ids(ctx.user_id)))
            .options(selectinload(TimeEntry.user))
            .order_by(TimeEntry.created_at.desc())
            .limit(RECENT_LIMIT)
        )
        return list(result.scalars().all())

    async def _team_load(self, ctx: OrgContext) -> list[dict]:
        """Task counts for everyone on a team that shares a project with the caller."""
        shared_teams = select(Team.id).where(
            Team.org_id == ctx.org_id,
            Team.projects.any(Project.id.in_(member_project_ids(ctx.user_id))),
        )
        members = await self.db.execute(
            select(User)
            .join(TeamMember, TeamMember.user_id == User.id)
            .where(TeamMember.team_id.in_(shared_teams))
            .distinct()
            .order_by(User.email)
        )
        users = list(members.scalars().all())
        if not users:
            return []

        counts = await self.db.execute(
            select(Task.assignee_id, func.count(Task.id))
            .where(Task.assignee_id.in_([u.id for u in users]))
            .group_by(Task.assignee_id)
        )
        by_user = {row[0]: row[1] for row in counts.all()}
        return [
            {"user": display_name(u), "tasks": by_user.get(u.id, 0)} for u in users
        ]

    async def build(self, ctx: OrgContext, now: Optional[datetime] = None) -> dict:
        now = now or datetime.now(timezone.utc)

        tasks = await self._visible_tasks(ctx)
        projects = await self._member_projects(ctx)
        activity = await self._recent_activity(ctx)
        distribution = await self._team_load(ctx)

        return {
            "tasks": summarize_tasks(tasks, now),
            "projects": {
                "total": len(projects),
                "active": sum(1 for p in projects if p.status == "ACTIVE"),
                "completed": sum(1 for p in projects if p.status == "COMPLETED"),
                "recent": [
                    {
                        "id": p.id,
                        "name": p.name,
                        "status": p.status,
                        "progress": project_progress(p.tasks),
                    }
                    for p in projects[:RECENT_LIMIT]
                ],
            },
            "team": {
                "total_members": len(distribution),
                "recent_activities": [
                    {
                        "id": e.id,
                        "user": display_name(e.user),
                        "action": e.description,
                        "target": e.duration,
                        "timestamp": e.created_at,
                    }
                    for e in activity
                ],
                "task_distribution": distribution,
            },
        }

    async def analytics(self, org_id: uuid.UUID) -> dict:
        """Every project in the org with its tasks, plus the flat task list."""
        projects = await self.db.execute(
            select(Project)
            .where(Project.org_id == org_id)
            .options(selectinload(Project.tasks).selectinload(Task.project))
            .order_by(Project.name)
        )
        projects = list(projects.scalars().all())
        tasks = [t for p in projects for t in p.tasks]
        tasks.sort(key=lambda t: ensure_utc(t.created_at), reverse=True)
        return {"projects": projects, "tasks": tasks}
