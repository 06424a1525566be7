import uuid

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from productiveflow.auth.dependencies import OrgContext
from productiveflow.db.models import Tag, task_tags
from productiveflow.services.errors import NotFoundError


class TagService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_tags(self, ctx: OrgContext) -> list[Tag]:
        result = await self.db.execute(
            select(Tag).where(Tag.org_id == ctx.org_id).order_by(Tag.name)
        )
        return list(result.scalars().all())

    async def create_tag(self, ctx: OrgContext, name: str, color: str) -> Tag:
        tag = Tag(org_id=ctx.org_id, name=name, color=color)
        self.db.add(tag)
        await self.db.commit()
        return tag

    async def get_tags(self, ctx: OrgContext, tag_ids: list[uuid.UUID]) -> list[Tag]:
        """Resolve tag ids within the org; any unknown id is a NotFoundError."""
        if not tag_ids:
            return []
        wanted = set(tag_ids)
        result = await self.db.execute(
            select(Tag).where(Tag.id.in_(wanted), Tag.org_id == ctx.org_id)
        )
        tags = list(result.scalars().all())
        if len(tags) != len(wanted):
            raise NotFoundError("Tag not found")
        return tags

    async def delete_tag(self, ctx: OrgContext, tag_id: uuid.UUID) -> None:
        tag = await self.db.get(Tag, tag_id)
        if tag is None or tag.org_id != ctx.org_id:
            raise NotFoundError("Tag not found")
        await self.db.execute(delete(task_tags).where(task_tags.c.tag_id == tag_id))
        await self.db.delete(tag)
        await self.db.commit()
