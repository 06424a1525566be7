"""User, profile and theme schemas."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import Field

from productiveflow.schemas.base import ROLE_PATTERN, CamelModel


class UserSummary(CamelModel):
    id: uuid.UUID
    name: Optional[str] = None
    email: str


class UserRead(UserSummary):
    role: str
    org_id: Optional[uuid.UUID] = None
    created_at: datetime


class UserCreate(CamelModel):
    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    name: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=8)
    role: str = Field(default="MEMBER", pattern=ROLE_PATTERN)


class ProfileRead(CamelModel):
    id: uuid.UUID
    name: Optional[str] = None
    email: str
    role: str
    org_id: Optional[uuid.UUID] = None
    profile_image: Optional[str] = None


class ProfileUpdate(CamelModel):
    """Partial update. new_password requires current_password."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[str] = Field(None, pattern=r"^[^@\s]+@[^@\s]+$")
    current_password: Optional[str] = None
    new_password: Optional[str] = Field(None, min_length=8)


class ThemeSettings(CamelModel):
    theme: str = Field(..., pattern=r"^(system|light|dark)$")
    accent_color: str = Field(..., pattern=r"^(blue|green|purple|red|orange)$")
