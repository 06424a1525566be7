"""Team and team membership schemas."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import Field

from productiveflow.schemas.base import ROLE_PATTERN, CamelModel
from productiveflow.schemas.user import UserSummary


class TeamCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)


class MemberAdd(CamelModel):
    email: str
    role: str = Field(default="MEMBER", pattern=ROLE_PATTERN)


class MemberUpdate(CamelModel):
    member_id: uuid.UUID
    role: str = Field(..., pattern=ROLE_PATTERN)


class ProjectAssign(CamelModel):
    project_id: uuid.UUID


class TeamMemberRead(CamelModel):
    id: uuid.UUID
    team_id: uuid.UUID
    user_id: uuid.UUID
    role: str
    user: UserSummary


class TeamTask(CamelModel):
    id: uuid.UUID
    status: str


class TeamProject(CamelModel):
    id: uuid.UUID
    name: str
    tasks: list[TeamTask] = []


class TeamRead(CamelModel):
    id: uuid.UUID
    org_id: uuid.UUID
    name: str
    description: Optional[str] = None
    created_at: datetime
    members: list[TeamMemberRead] = []
    projects: list[TeamProject] = []
