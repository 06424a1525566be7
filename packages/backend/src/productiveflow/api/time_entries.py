"""Time entry routes: start, stop and list the caller's timers."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from productiveflow.auth.dependencies import OrgContext, org_member
from productiveflow.db.engine import get_db
from productiveflow.schemas.time_entry import (
    TimeEntryCreate,
    TimeEntryRead,
    TimeEntryUpdate,
)
from productiveflow.services.time_entry_service import TimeEntryService

router = APIRouter(prefix="/time-entries")


def _svc(db: AsyncSession = Depends(get_db)) -> TimeEntryService:
    return TimeEntryService(db)


@router.get("", response_model=list[TimeEntryRead])
async def list_time_entries(
    task_id: Optional[uuid.UUID] = Query(None, alias="taskId"),
    status: Optional[str] = Query(None, pattern=r"^in-progress$"),
    ctx: OrgContext = Depends(org_member),
    svc: TimeEntryService = Depends(_svc),
):
    """?status=in-progress narrows to running timers."""
    return await svc.list_entries(
        ctx, task_id=task_id, running_only=status == "in-progress"
    )


@router.post("", response_model=TimeEntryRead, status_code=201)
async def create_time_entry(
    body: TimeEntryCreate,
    ctx: OrgContext = Depends(org_member),
    svc: TimeEntryService = Depends(_svc),
):
    return await svc.create_entry(
        ctx,
        task_id=body.task_id,
        start_time=body.start_time,
        end_time=body.end_time,
        description=body.description,
    )


@router.put("", response_model=TimeEntryRead)
async def update_time_entry(
    body: TimeEntryUpdate,
    ctx: OrgContext = Depends(org_member),
    svc: TimeEntryService = Depends(_svc),
):
    return await svc.update_entry(
        ctx, body.id, end_time=body.end_time, description=body.description
    )
