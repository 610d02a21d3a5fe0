"""User management API endpoints."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, status

from user_api.core.dependencies import get_current_user, get_user_service, require_admin
from user_api.models.user import User
from user_api.schemas.common import ErrorResponse, OffsetPaginationParams, SuccessResponse
from user_api.schemas.user import UserCreateRequest, UserResponse, UserUpdateRequest
from user_api.services.user_service import UserService

users_router = APIRouter(
    prefix="/users",
    tags=["users"],
    responses={
        401: {"model": ErrorResponse, "description": "Missing or rejected credentials"},
        498: {"model": ErrorResponse, "description": "Invalid or expired token"},
    },
)


@users_router.get(
    "",
    response_model=list[UserResponse],
    responses={204: {"description": "No users on this page"}},
)
async def list_users(
    _current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[UserService, Depends(get_user_service)],
    pagination: Annotated[OffsetPaginationParams, Depends()],
) -> list[User]:
    """List non-admin users, newest first."""
    return await service.find_all(pagination.offset, pagination.limit)


@users_router.get(
    "/{user_id}",
    response_model=UserResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_user(
    user_id: uuid.UUID,
    _current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> User:
    return await service.find_by_id(user_id)


@users_router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def create_user(
    request: UserCreateRequest,
    _current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> User:
    """Create a user and grant the requested site permissions."""
    return await service.create(request)


@users_router.patch(
    "/{user_id}",
    response_model=SuccessResponse,
    responses={404: {"model": ErrorResponse}},
)
async def update_user(
    user_id: uuid.UUID,
    request: UserUpdateRequest,
    _current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> SuccessResponse:
    """Update a user's full name and append site permission grants."""
    return SuccessResponse(success=await service.update(user_id, request))


@users_router.delete(
    "/{user_id}",
    response_model=SuccessResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def delete_user(
    user_id: uuid.UUID,
    _current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> SuccessResponse:
    """Soft-delete a user."""
    return SuccessResponse(success=await service.delete(user_id))


@users_router.delete("", response_model=SuccessResponse)
async def delete_all_users(
    _admin: Annotated[User, Depends(require_admin)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> SuccessResponse:
    """Permanently remove every non-admin user (admin only)."""
    return SuccessResponse(success=await service.delete_all())


@users_router.post(
    "/{user_id}/lock",
    response_model=SuccessResponse,
    responses={404: {"model": ErrorResponse}},
)
async def lock_and_unlock_user(
    user_id: uuid.UUID,
    _admin: Annotated[User, Depends(require_admin)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> SuccessResponse:
    """Toggle a user's lock flag (admin only)."""
    return SuccessResponse(success=await service.lock_and_unlock_user(user_id))
