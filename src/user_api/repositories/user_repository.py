"""User repository -- data access for the ``users`` table."""

import uuid

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from user_api.models.user import User


class UserRepository:
    """Async CRUD access to users over a request-scoped session.

    The repository does not open transactions of its own; ``save`` and
    ``delete_all_except`` commit whatever the session holds, including rows
    staged by sibling services sharing the session.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def find_all_except(
        self,
        excluded_username: str,
        *,
        offset: int = 0,
        limit: int = 20,
        active_only: bool = False,
    ) -> list[User]:
        """Return users other than ``excluded_username``, newest first."""
        query = select(User).where(User.username != excluded_username)
        if active_only:
            query = query.where(User.is_active.is_(True))
        query = query.order_by(User.created_at.desc()).offset(offset).limit(limit)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def find_by_id(self, user_id: uuid.UUID) -> User | None:
        result = await self.session.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def find_by_username(self, username: str) -> User | None:
        result = await self.session.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    def add(self, user: User) -> None:
        """Stage a new user in the session without committing."""
        self.session.add(user)

    async def save(self, user: User) -> User:
        """Commit pending changes and reload ``user``.

        Raises:
            sqlalchemy.exc.IntegrityError: If a constraint is violated. The
                session is rolled back before the error propagates.
        """
        self.session.add(user)
        try:
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        await self.session.refresh(user)
        return user

    async def rollback(self) -> None:
        await self.session.rollback()

    async def delete_all_except(self, excluded_username: str) -> int:
        """Physically delete every user other than ``excluded_username``.

        Returns:
            Number of rows removed.
        """
        result = await self.session.execute(delete(User).where(User.username != excluded_username))
        await self.session.commit()
        return result.rowcount or 0
