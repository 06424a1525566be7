import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from productiveflow.auth.dependencies import OrgContext, org_member
from productiveflow.db.engine import get_db
from productiveflow.schemas.tag import TagCreate, TagRead
from productiveflow.services.tag_service import TagService

router = APIRouter(prefix="/tags")


def _svc(db: AsyncSession = Depends(get_db)) -> TagService:
    return TagService(db)


@router.get("", response_model=list[TagRead])
async def list_tags(ctx: OrgContext = Depends(org_member), svc: TagService = Depends(_svc)):
    return await svc.list_tags(ctx)


@router.post("", response_model=TagRead, status_code=201)
async def create_tag(
    body: TagCreate,
    ctx: OrgContext = Depends(org_member),
    svc: TagService = Depends(_svc),
):
    return await svc.create_tag(ctx, name=body.name, color=body.color)


@router.delete("/{tag_id}")
async def delete_tag(
    tag_id: uuid.UUID,
    ctx: OrgContext = Depends(org_member),
    svc: TagService = Depends(_svc),
):
    await svc.delete_tag(ctx, tag_id)
    return {"deleted": True}
