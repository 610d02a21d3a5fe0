"""Authentication API endpoints.

GET /health, GET /info, POST /auth/login, GET /auth/me.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from user_api import __version__
from user_api.core.config import Settings, get_settings
from user_api.core.dependencies import get_current_user, get_user_service
from user_api.models.user import User
from user_api.schemas.auth import LoginRequest, LoginResponse
from user_api.schemas.user import UserResponse
from user_api.services.user_service import UserService

router = APIRouter(tags=["auth"])


@router.get("/health", status_code=200)
async def health_check() -> dict:
    """Health check endpoint (no authentication required)."""
    return {"status": "healthy"}


@router.get("/info", status_code=200)
async def info(
    settings: Annotated[Settings, Depends(get_settings)],
) -> dict:
    """Return application version and environment."""
    return {
        "version": __version__,
        "environment": settings.environment,
    }


@router.post("/auth/login", response_model=LoginResponse)
async def login(
    request: LoginRequest,
    service: Annotated[UserService, Depends(get_user_service)],
) -> LoginResponse:
    """Check credentials; return a signed token and the user's sites."""
    return await service.login(request)


@router.get("/auth/me", response_model=UserResponse)
async def get_me(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Get the profile of the user the bearer token belongs to."""
    return current_user
