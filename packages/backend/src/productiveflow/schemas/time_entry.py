import uuid
from datetime import datetime
from typing import Optional

from pydantic import Field

from productiveflow.schemas.base import CamelModel
from productiveflow.schemas.project import ProjectRef


class TimeEntryCreate(CamelModel):
    task_id: uuid.UUID
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    description: Optional[str] = Field(None, max_length=2000)


class TimeEntryUpdate(CamelModel):
    id: uuid.UUID
    end_time: Optional[datetime] = None
    description: Optional[str] = Field(None, max_length=2000)


class TimeEntryTask(CamelModel):
    id: uuid.UUID
    title: str
    project: ProjectRef


class TimeEntryRead(CamelModel):
    id: uuid.UUID
    task_id: uuid.UUID
    user_id: uuid.UUID
    project_id: Optional[uuid.UUID] = None
    start_time: datetime
    end_time: Optional[datetime] = None
    duration: Optional[int] = None
    description: Optional[str] = None
    created_at: datetime
    task: TimeEntryTask
