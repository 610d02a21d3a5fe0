"""Login request/response schemas."""

from pydantic import BaseModel, Field

from user_api.schemas.site import SiteResponse


class LoginRequest(BaseModel):
    """Login request with username and password."""

    username: str = Field(min_length=1, max_length=100)
    password: str = Field(min_length=1)


class LoginResponse(BaseModel):
    """Signed token plus the sites the user holds permissions on."""

    token: str
    token_type: str = "bearer"
    sites: list[SiteResponse] = Field(default_factory=list)
