"""User permission service -- append-only per-site permission grants."""

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from user_api.models.user_permission import UserPermission


class UserPermissionService:
    """Stores and retrieves ``UserPermission`` rows.

    ``create`` only stages and flushes the row; the caller owns the
    transaction and commits it together with the user it belongs to.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(
        self,
        *,
        user_id: uuid.UUID,
        site_id: uuid.UUID,
        permissions: list[str],
    ) -> UserPermission:
        """Stage a permission grant for ``user_id`` on ``site_id``.

        Args:
            user_id: The user receiving the grant.
            site_id: The site the grant is scoped to. Must already be validated.
            permissions: Permission identifiers; stored as given.

        Returns:
            The pending UserPermission.
        """
        user_permission = UserPermission(
            id=uuid.uuid4(),
            user_id=user_id,
            site_id=site_id,
            permissions=list(permissions),
        )
        self.session.add(user_permission)
        await self.session.flush()
        return user_permission

    async def find_all_by_user_id(self, user_id: uuid.UUID) -> list[UserPermission]:
        """Return every grant held by ``user_id``, oldest first."""
        result = await self.session.execute(
            select(UserPermission).where(UserPermission.user_id == user_id).order_by(UserPermission.created_at)
        )
        return list(result.scalars().all())
