"""Common Pydantic v2 schemas shared across the API."""

from pydantic import BaseModel, Field


class OffsetPaginationParams(BaseModel):
    """Query parameters for offset/limit listings."""

    offset: int = Field(default=0, ge=0, description="Number of items to skip")
    limit: int = Field(default=20, ge=1, le=100, description="Maximum number of items to return")


class SuccessResponse(BaseModel):
    """Boolean outcome of a mutation."""

    success: bool


class ErrorResponse(BaseModel):
    """Standard error response body."""

    detail: str = Field(description="Human-readable error message")
    code: str | None = Field(default=None, description="Machine-readable error code")
    errors: list[dict] | None = Field(default=None, description="Detailed error context")
