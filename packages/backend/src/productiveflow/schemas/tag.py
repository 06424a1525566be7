import uuid

from pydantic import Field

from productiveflow.schemas.base import HEX_COLOR_PATTERN, CamelModel


class TagCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=50)
    color: str = Field(..., pattern=HEX_COLOR_PATTERN)


class TagRead(CamelModel):
    id: uuid.UUID
    name: str
    color: str
