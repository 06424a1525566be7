"""Organization schemas."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import Field

from productiveflow.schemas.base import CamelModel


class OrgCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)


class OrgRead(CamelModel):
    id: uuid.UUID
    name: str
    created_at: datetime


class OrgUser(CamelModel):
    id: uuid.UUID
    name: Optional[str] = None
    email: str


class OrgTaskStatus(CamelModel):
    id: uuid.UUID
    status: str


class OrgProject(CamelModel):
    id: uuid.UUID
    name: str
    tasks: list[OrgTaskStatus] = []


class OrgDetail(OrgRead):
    users: list[OrgUser] = []
    projects: list[OrgProject] = []
