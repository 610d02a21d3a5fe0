"""Site model -- the scope a user permission applies to."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from user_api.models.base import Base, TimestampMixin, UUIDMixin


class Site(Base, UUIDMixin, TimestampMixin):
    """A site users can be granted permissions on."""

    __tablename__ = "sites"

    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
