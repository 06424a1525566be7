"""Task schemas.

TaskCreate/TaskReplace carry the full field set (POST / PUT); TaskPatch
is a partial update where only fields present in the body apply.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import Field

from productiveflow.schemas.base import (
    PRIORITY_PATTERN,
    TASK_STATUS_PATTERN,
    CamelModel,
)
from productiveflow.schemas.project import ProjectRef
from productiveflow.schemas.tag import TagRead
from productiveflow.schemas.user import UserSummary


class TaskCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=500)
    description: Optional[str] = None
    status: str = Field(default="TODO", pattern=TASK_STATUS_PATTERN)
    priority: str = Field(default="MEDIUM", pattern=PRIORITY_PATTERN)
    due_date: Optional[datetime] = None
    project_id: uuid.UUID
    assignee_id: Optional[uuid.UUID] = None
    tag_ids: list[uuid.UUID] = Field(default_factory=list)


class TaskReplace(TaskCreate):
    pass


class TaskPatch(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=500)
    description: Optional[str] = None
    status: Optional[str] = Field(None, pattern=TASK_STATUS_PATTERN)
    priority: Optional[str] = Field(None, pattern=PRIORITY_PATTERN)
    due_date: Optional[datetime] = None
    project_id: Optional[uuid.UUID] = None
    assignee_id: Optional[uuid.UUID] = None
    tag_ids: Optional[list[uuid.UUID]] = None


class TaskRead(CamelModel):
    id: uuid.UUID
    title: str
    description: Optional[str] = None
    status: str
    priority: str
    due_date: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    project: ProjectRef
    assignee: Optional[UserSummary] = None
    tags: list[TagRead] = []
