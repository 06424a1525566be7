"""Schemas for sign-in, sign-up, session check and password reset."""

import uuid
from typing import Optional

from pydantic import Field

from productiveflow.schemas.base import CamelModel


class SignInRequest(CamelModel):
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1)
    remember: bool = False


class SignUpRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(..., min_length=8)


class SessionUserRead(CamelModel):
    id: uuid.UUID
    email: str
    name: Optional[str] = None
    org_id: Optional[uuid.UUID] = None


class SignInResponse(CamelModel):
    success: bool = True
    user: SessionUserRead


class SignUpResponse(CamelModel):
    id: uuid.UUID
    email: str
    name: Optional[str] = None


class AuthCheckUser(SessionUserRead):
    role: str


class AuthCheckResponse(CamelModel):
    authorized: bool
    needs_org: Optional[bool] = None
    user: Optional[AuthCheckUser] = None


class ResetPasswordRequest(CamelModel):
    email: str


class ResetPasswordResponse(CamelModel):
    ok: bool = True
    reset_token: Optional[str] = None  # only outside production


class ResetPasswordConfirm(CamelModel):
    token: str = Field(..., min_length=16)
    password: str = Field(..., min_length=8)
