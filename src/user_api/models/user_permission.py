"""UserPermission model -- grants a user a set of permissions on one site.

Rows are append-only: the service creates them but never updates or
deletes them. ``user_id`` and ``site_id`` are weak references; the site is
validated before a row is written, but no foreign key is declared so that
bulk user removal leaves historical grants in place.
"""

import uuid

from sqlalchemy import JSON, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from user_api.models.base import Base, TimestampMixin, UUIDMixin


class UserPermission(Base, UUIDMixin, TimestampMixin):
    """Association of a user to a site with a list of permission identifiers."""

    __tablename__ = "user_permissions"

    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    site_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    permissions: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
