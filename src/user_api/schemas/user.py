"""User Pydantic v2 schemas.

Defines request/response schemas for user management. Responses never
expose the password hash.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class SitePermissionInput(BaseModel):
    """Permissions to grant on one site."""

    site_id: UUID
    permissions: list[str] = Field(default_factory=list)


class UserCreateRequest(BaseModel):
    """Request to create a new user."""

    username: str = Field(min_length=3, max_length=100)
    password: str = Field(min_length=8)
    full_name: str = Field(default="", max_length=255)
    sites: list[SitePermissionInput] = Field(default_factory=list)


class UserUpdateRequest(BaseModel):
    """Request to update a user's profile and append site permissions."""

    full_name: str = Field(max_length=255)
    sites: list[SitePermissionInput] = Field(default_factory=list)


class UserResponse(BaseModel):
    """User information response."""

    id: UUID
    username: str
    full_name: str
    is_active: bool
    is_locked: bool
    created_at: datetime

    model_config = {"from_attributes": True}
