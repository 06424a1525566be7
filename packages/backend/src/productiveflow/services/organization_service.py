"""Organization service: creation and the caller's org overview."""

import uuid
from typing import Optional

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from productiveflow.db.models import Organization, Project, User
from productiveflow.services.errors import ConflictError, NotFoundError

logger = structlog.get_logger()


class OrganizationService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_for_user(self, user_id: uuid.UUID, name: str) -> Organization:
        """Create an org and make `user_id` its first member and admin.

        The insert and the user's org_id update commit together or not at
        all; a user who already has an org gets a ConflictError.
        """
        user = await self.db.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")
        if user.org_id is not None:
            raise ConflictError("User already belongs to an organization")

        org = Organization(name=name)
        self.db.add(org)
        try:
            await self.db.flush()  # need org.id
            user.org_id = org.id
            user.role = "ADMIN"
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info("org.created", org_id=str(org.id), user_id=str(user_id))
        return org

    async def get_detail(self, org_id: Optional[uuid.UUID]) -> Optional[Organization]:
        if org_id is None:
            return None
        result = await self.db.execute(
            select(Organization)
            .where(Organization.id == org_id)
            .options(
                selectinload(Organization.users),
                selectinload(Organization.projects).selectinload(Project.tasks),
            )
        )
        return result.scalars().first()
