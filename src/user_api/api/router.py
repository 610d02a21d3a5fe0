"""Root API router with /api/v1 prefix and middleware registration."""

from fastapi import APIRouter, FastAPI

from user_api.api.middleware import RequestLoggingMiddleware, setup_cors
from user_api.core.config import Settings


def create_router(settings: Settings) -> APIRouter:
    """Create the root API router with all sub-routers included.

    Args:
        settings: Application settings.

    Returns:
        Configured API router.
    """
    from user_api.api.v1.auth import router as auth_router
    from user_api.api.v1.sites import sites_router
    from user_api.api.v1.users import users_router

    root_router = APIRouter(prefix=settings.api_v1_prefix)
    root_router.include_router(auth_router)
    root_router.include_router(users_router)
    root_router.include_router(sites_router)

    return root_router


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Register all middleware on the FastAPI app."""
    setup_cors(app, settings)
    app.add_middleware(RequestLoggingMiddleware)
