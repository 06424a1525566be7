"""Shared pydantic base for API schemas.

The browser client speaks camelCase (orgId, dueDate, tagIds); Python code
stays snake_case. Field names are aliased both ways, and FastAPI
serializes responses by alias.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


ROLE_PATTERN = r"^(ADMIN|MEMBER|VIEWER)$"
PRIORITY_PATTERN = r"^(LOW|MEDIUM|HIGH)$"
TASK_STATUS_PATTERN = r"^(TODO|IN_PROGRESS|REVIEW|COMPLETED)$"
PROJECT_STATUS_PATTERN = r"^(ACTIVE|ON_HOLD|COMPLETED)$"
HEX_COLOR_PATTERN = r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$"
