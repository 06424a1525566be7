"""Time tracking: start/stop timers and log spans against tasks.

duration is whole seconds, computed only when both ends are known. A
running timer has end_time NULL.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from productiveflow.auth.dependencies import OrgContext
from productiveflow.db.models import Task, TimeEntry, ensure_utc, utcnow
from productiveflow.services.errors import (
    NotFoundError,
    PermissionDeniedError,
    ValidationFailedError,
)
from productiveflow.services.task_service import TaskService

_ENTRY_LOADS = (selectinload(TimeEntry.task).selectinload(Task.project),)


def span_seconds(start: datetime, end: Optional[datetime]) -> Optional[int]:
    if end is None:
        return None
    seconds = (ensure_utc(end) - ensure_utc(start)).total_seconds()
    if seconds < 0:
        raise ValidationFailedError("End time must not be before start time")
    return int(seconds)


class TimeEntryService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.tasks = TaskService(db)

    async def _load(self, entry_id: uuid.UUID) -> Optional[TimeEntry]:
        result = await self.db.execute(
            select(TimeEntry)
            .where(TimeEntry.id == entry_id)
            .options(*_ENTRY_LOADS)
            .execution_options(populate_existing=True)
        )
        return result.scalars().first()

    async def list_entries(
        self,
        ctx: OrgContext,
        task_id: Optional[uuid.UUID] = None,
        running_only: bool = False,
    ) -> list[TimeEntry]:
        """The caller's own entries, newest first."""
        query = (
            select(TimeEntry)
            .where(TimeEntry.user_id == ctx.user_id)
            .options(*_ENTRY_LOADS)
            .order_by(TimeEntry.start_time.desc())
        )
        if task_id:
            query = query.where(TimeEntry.task_id == task_id)
        if running_only:
            query = query.where(TimeEntry.end_time.is_(None))
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def create_entry(
        self,
        ctx: OrgContext,
        task_id: uuid.UUID,
        start_time: Optional[datetime] = None,
        end_time: Optional[datetime] = None,
        description: Optional[str] = None,
    ) -> TimeEntry:
        task = await self.tasks.get_task(ctx, task_id)
        if task is None:
            raise NotFoundError("Task not found")

        start = start_time or utcnow()
        entry = TimeEntry(
            task_id=task.id,
            user_id=ctx.user_id,
            project_id=task.project_id,
            start_time=start,
            end_time=end_time,
            duration=span_seconds(start, end_time),
            description=description,
        )
        self.db.add(entry)
        await self.db.commit()
        return await self._load(entry.id)

    async def update_entry(
        self,
        ctx: OrgContext,
        entry_id: uuid.UUID,
        end_time: Optional[datetime] = None,
        description: Optional[str] = None,
    ) -> TimeEntry:
        """Stop (or re-open, with end_time None) one of the caller's entries."""
        entry = await self._load(entry_id)
        if entry is None or entry.task.project.org_id != ctx.org_id:
            raise NotFoundError("Time entry not found")
        if entry.user_id != ctx.user_id:
            raise PermissionDeniedError("Not your time entry")

        entry.end_time = end_time
        entry.duration = span_seconds(entry.start_time, end_time)
        if description is not None:
            entry.description = description
        await self.db.commit()
        return await self._load(entry_id)
