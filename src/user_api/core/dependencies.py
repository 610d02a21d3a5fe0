"""FastAPI dependency injection for sessions, services, and authentication."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from user_api.core.config import Settings, get_settings
from user_api.core.database import get_session_factory
from user_api.core.errors import UnauthorizedError
from user_api.models.user import User
from user_api.services.site_service import SiteService
from user_api.services.user_service import UserService, build_user_service

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/v1/auth/login")


async def get_async_session() -> AsyncGenerator[AsyncSession]:
    """Yield an async database session with per-request lifecycle."""
    factory = get_session_factory()
    async with factory() as session:
        yield session


def get_user_service(
    session: Annotated[AsyncSession, Depends(get_async_session)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> UserService:
    """Build a UserService bound to the request's session."""
    return build_user_service(session, settings)


def get_site_service(
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> SiteService:
    return SiteService(session)


async def get_current_user(
    token: Annotated[str, Depends(oauth2_scheme)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> User:
    """Resolve the bearer token to an active user.

    Raises:
        InvalidTokenError: If the token fails verification (498).
        UnauthorizedError: If the token's user is gone or deactivated (401).
    """
    user = await service.find_one_by_token(token)
    if user is None or not user.is_active:
        raise UnauthorizedError("Unauthorized")
    return user


async def require_admin(
    current_user: Annotated[User, Depends(get_current_user)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> User:
    """Allow only the configured admin account through."""
    if current_user.username != settings.admin_username:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"User '{current_user.username}' does not have access to this resource",
        )
    return current_user
