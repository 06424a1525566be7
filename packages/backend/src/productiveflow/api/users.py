"""Organization user routes. Listing is open to members; creating needs org ADMIN."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from productiveflow.auth.dependencies import OrgContext, org_member, require_role
from productiveflow.db.engine import get_db
from productiveflow.schemas.user import UserCreate, UserRead
from productiveflow.services.user_service import UserService

router = APIRouter(prefix="/users")


def _svc(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db)


@router.get("", response_model=list[UserRead])
async def list_users(ctx: OrgContext = Depends(org_member), svc: UserService = Depends(_svc)):
    return await svc.list_org_users(ctx)


@router.post("", response_model=UserRead, status_code=201)
async def create_user(
    body: UserCreate,
    ctx: OrgContext = Depends(require_role("ADMIN")),
    svc: UserService = Depends(_svc),
):
    return await svc.create_org_user(
        ctx, email=body.email, name=body.name, password=body.password, role=body.role
    )
