"""Task routes.

Learn: PUT replaces every field (a missing dueDate or assigneeId clears
it); PATCH only touches the fields present in the body. Both go through
TaskService.update_task, which re-checks org ownership of anything linked.
"""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from productiveflow.auth.dependencies import OrgContext, org_member
from productiveflow.db.engine import get_db
from productiveflow.schemas.task import TaskCreate, TaskPatch, TaskRead, TaskReplace
from productiveflow.services.task_service import TaskService

router = APIRouter(prefix="/tasks")


def _svc(db: AsyncSession = Depends(get_db)) -> TaskService:
    return TaskService(db)


@router.get("", response_model=list[TaskRead])
async def list_tasks(
    project_id: Optional[uuid.UUID] = Query(None, alias="projectId"),
    ctx: OrgContext = Depends(org_member),
    svc: TaskService = Depends(_svc),
):
    return await svc.list_tasks(ctx, project_id=project_id)


@router.post("", response_model=TaskRead, status_code=201)
async def create_task(
    body: TaskCreate,
    ctx: OrgContext = Depends(org_member),
    svc: TaskService = Depends(_svc),
):
    return await svc.create_task(ctx, **body.model_dump())


@router.get("/{task_id}", response_model=TaskRead)
async def get_task(
    task_id: uuid.UUID,
    ctx: OrgContext = Depends(org_member),
    svc: TaskService = Depends(_svc),
):
    task = await svc.get_task(ctx, task_id)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    return task


@router.put("/{task_id}", response_model=TaskRead)
async def replace_task(
    task_id: uuid.UUID,
    body: TaskReplace,
    ctx: OrgContext = Depends(org_member),
    svc: TaskService = Depends(_svc),
):
    return await svc.update_task(ctx, task_id, body.model_dump())


@router.patch("/{task_id}", response_model=TaskRead)
async def patch_task(
    task_id: uuid.UUID,
    body: TaskPatch,
    ctx: OrgContext = Depends(org_member),
    svc: TaskService = Depends(_svc),
):
    return await svc.update_task(ctx, task_id, body.model_dump(exclude_unset=True))


@router.delete("/{task_id}")
async def delete_task(
    task_id: uuid.UUID,
    ctx: OrgContext = Depends(org_member),
    svc: TaskService = Depends(_svc),
):
    await svc.delete_task(ctx, task_id)
    return {"deleted": True}
