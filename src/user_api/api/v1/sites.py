"""Site registration API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from user_api.core.dependencies import get_current_user, get_site_service, require_admin
from user_api.models.site import Site
from user_api.models.user import User
from user_api.schemas.common import ErrorResponse
from user_api.schemas.site import SiteCreateRequest, SiteResponse
from user_api.services.site_service import SiteService

sites_router = APIRouter(prefix="/sites", tags=["sites"])


@sites_router.get("", response_model=list[SiteResponse])
async def list_sites(
    _current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[SiteService, Depends(get_site_service)],
) -> list[Site]:
    return await service.list_sites()


@sites_router.post(
    "",
    response_model=SiteResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}},
)
async def create_site(
    request: SiteCreateRequest,
    _admin: Annotated[User, Depends(require_admin)],
    service: Annotated[SiteService, Depends(get_site_service)],
) -> Site:
    """Register a new site (admin only)."""
    return await service.create(request.name)
