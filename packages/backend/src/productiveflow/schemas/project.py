"""Project schemas."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import Field

from productiveflow.schemas.base import (
    PRIORITY_PATTERN,
    PROJECT_STATUS_PATTERN,
    CamelModel,
)
from productiveflow.schemas.user import UserSummary


class ProjectCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    start_date: datetime
    end_date: datetime
    status: str = Field(default="ACTIVE", pattern=PROJECT_STATUS_PATTERN)
    priority: str = Field(default="MEDIUM", pattern=PRIORITY_PATTERN)


class ProjectUpdate(CamelModel):
    """Partial update; only non-None fields are applied."""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    status: Optional[str] = Field(None, pattern=PROJECT_STATUS_PATTERN)
    priority: Optional[str] = Field(None, pattern=PRIORITY_PATTERN)


class ProjectRef(CamelModel):
    id: uuid.UUID
    name: str


class TeamRef(CamelModel):
    id: uuid.UUID


class ProjectListItem(ProjectRef):
    description: Optional[str] = None
    status: str
    teams: list[TeamRef] = []


class ProjectRead(ProjectRef):
    description: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    status: str
    priority: str
    created_at: datetime
    updated_at: datetime
    users: list[UserSummary] = []
