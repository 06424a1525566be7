"""Auth API: sign-in, sign-up, sign-out, session check, password reset.

Learn: These routes are open (no include_router dependency); each one
establishes or inspects the session itself:
- POST /auth/signin  → email/password → session cookie (24h, or 30d with remember)
- POST /auth/signup  → new account → 24h session cookie
- POST /auth/signout → delete the cookie
- GET  /auth/check   → who am I, and do I still need an organization?
- POST /auth/reset-password(/confirm) → one-time reset token flow

Failed sign-in never sets a cookie and never says which half of the
credentials was wrong.
"""

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Response
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from productiveflow.auth.identity import ResolvedIdentity, auth
from productiveflow.auth.session import clear_session, create_session
from productiveflow.config import settings
from productiveflow.db.engine import get_db
from productiveflow.schemas.auth import (
    AuthCheckResponse,
    ResetPasswordConfirm,
    ResetPasswordRequest,
    ResetPasswordResponse,
    SessionUserRead,
    SignInRequest,
    SignInResponse,
    SignUpRequest,
    SignUpResponse,
)
from productiveflow.services.user_service import UserService

logger = structlog.get_logger()

router = APIRouter(prefix="/auth")


def _svc(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db)


# ─── Sign in / up / out ─────────────────────────────────


@router.post("/signin", response_model=SignInResponse)
async def signin(
    body: SignInRequest, response: Response, svc: UserService = Depends(_svc)
):
    user = await svc.authenticate(body.email, body.password)
    if user is None:
        logger.info("auth.signin_failed")
        raise HTTPException(status_code=401, detail="Invalid credentials")

    create_session(response, user, remember=body.remember)
    logger.info("auth.signin", user_id=str(user.id), remember=body.remember)
    return SignInResponse(user=SessionUserRead.model_validate(user))


@router.post("/signup", response_model=SignUpResponse, status_code=201)
async def signup(
    body: SignUpRequest, response: Response, svc: UserService = Depends(_svc)
):
    user = await svc.register(name=body.name, email=body.email, password=body.password)
    create_session(response, user)
    logger.info("auth.signup", user_id=str(user.id))
    return user


@router.post("/signout")
async def signout(response: Response):
    clear_session(response)
    logger.info("auth.signout")
    return {"success": True}


# ─── Session check ──────────────────────────────────────


@router.get("/check", response_model=AuthCheckResponse, response_model_exclude_none=True)
async def check(identity: Optional[ResolvedIdentity] = Depends(auth)):
    if identity is None:
        return JSONResponse(status_code=401, content={"authorized": False})
    if not identity.has_org:
        return AuthCheckResponse(authorized=True, needs_org=True)
    return AuthCheckResponse(authorized=True, user=identity.to_public())


# ─── Password reset ─────────────────────────────────────


@router.post("/reset-password", response_model=ResetPasswordResponse,
             response_model_exclude_none=True)
async def reset_password(body: ResetPasswordRequest, svc: UserService = Depends(_svc)):
    """Always answers ok so the endpoint cannot be used to probe for accounts."""
    token = await svc.request_password_reset(body.email)
    if settings.is_production:
        token = None
    return ResetPasswordResponse(reset_token=token)


@router.post("/reset-password/confirm")
async def confirm_reset_password(
    body: ResetPasswordConfirm, svc: UserService = Depends(_svc)
):
    await svc.confirm_password_reset(body.token, body.password)
    return {"ok": True}
