"""User account model."""

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from user_api.models.base import Base, TimestampMixin, UUIDMixin


class User(Base, UUIDMixin, TimestampMixin):
    """An account that can log in and hold per-site permissions.

    Attributes:
        username: Unique login name, enforced by a unique index.
        password: bcrypt hash of the password; never the plaintext.
        full_name: Display name.
        is_active: False once the user has been soft-deleted. Never reset.
        is_locked: Administrative lock flag, toggled by lock/unlock.
    """

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False, default="", server_default="")
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default="true")
    is_locked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="false")
