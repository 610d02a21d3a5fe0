"""Site Pydantic v2 schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class SiteCreateRequest(BaseModel):
    """Request to register a new site."""

    name: str = Field(min_length=1, max_length=255)


class SiteResponse(BaseModel):
    """Site information response."""

    id: UUID
    name: str
    created_at: datetime

    model_config = {"from_attributes": True}
