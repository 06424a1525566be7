"""Reusable query fragments for tenant scoping."""

import uuid

from sqlalchemy import Select, select

from productiveflow.db.models import project_users


def member_project_ids(user_id: uuid.UUID) -> Select:
    """Ids of projects `user_id` is a member of."""
    return select(project_users.c.project_id).where(
        project_users.c.user_id == user_id
    )
