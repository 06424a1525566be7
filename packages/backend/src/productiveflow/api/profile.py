"""The caller's own profile and appearance settings.

Learn: Mounted with api_identity only; editing your profile does not
require belonging to an organization.
"""

import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from productiveflow.auth.dependencies import api_identity
from productiveflow.auth.identity import ResolvedIdentity
from productiveflow.db.engine import get_db
from productiveflow.schemas.user import ProfileRead, ProfileUpdate, ThemeSettings
from productiveflow.services.user_service import UserService

router = APIRouter(prefix="/user")


def _svc(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db)


async def _current_user(identity: ResolvedIdentity, svc: UserService):
    user = await svc.get(uuid.UUID(identity.id))
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


# ─── Profile ────────────────────────────────────────────


@router.get("/profile", response_model=ProfileRead)
async def get_profile(
    identity: ResolvedIdentity = Depends(api_identity),
    svc: UserService = Depends(_svc),
):
    return await _current_user(identity, svc)


@router.put("/profile", response_model=ProfileRead)
async def update_profile(
    body: ProfileUpdate,
    identity: ResolvedIdentity = Depends(api_identity),
    svc: UserService = Depends(_svc),
):
    return await svc.update_profile(
        uuid.UUID(identity.id),
        name=body.name,
        email=body.email,
        current_password=body.current_password,
        new_password=body.new_password,
    )


# ─── Theme ──────────────────────────────────────────────


@router.get("/theme", response_model=ThemeSettings)
async def get_theme(
    identity: ResolvedIdentity = Depends(api_identity),
    svc: UserService = Depends(_svc),
):
    return await _current_user(identity, svc)


@router.put("/theme", response_model=ThemeSettings)
async def update_theme(
    body: ThemeSettings,
    identity: ResolvedIdentity = Depends(api_identity),
    svc: UserService = Depends(_svc),
):
    return await svc.update_theme(
        uuid.UUID(identity.id), theme=body.theme, accent_color=body.accent_color
    )
