"""ORM model registry -- import all models so Alembic autogenerate discovers them."""

from user_api.models.site import Site
from user_api.models.user import User
from user_api.models.user_permission import UserPermission

__all__ = [
    "Site",
    "User",
    "UserPermission",
]
