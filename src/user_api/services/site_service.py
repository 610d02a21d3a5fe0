"""Site service -- existence checks and lookups for permission scopes."""

import uuid
from collections.abc import Iterable

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from user_api.core.errors import ConflictError, NotFoundError
from user_api.models.site import Site


class SiteService:
    """Lookups and registration for sites."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def find_by_id(self, site_id: uuid.UUID) -> Site:
        """Return the site with ``site_id``.

        Raises:
            NotFoundError: If no such site exists.
        """
        result = await self.session.execute(select(Site).where(Site.id == site_id))
        site = result.scalar_one_or_none()
        if site is None:
            raise NotFoundError("Not Found: Site", details={"site_ids": [str(site_id)]})
        return site

    async def find_all_by_ids(self, site_ids: Iterable[uuid.UUID]) -> list[Site]:
        """Return the sites matching ``site_ids``, ordered by name.

        Unknown ids are skipped; duplicates collapse to one site.
        """
        unique_ids = set(site_ids)
        if not unique_ids:
            return []
        result = await self.session.execute(select(Site).where(Site.id.in_(unique_ids)).order_by(Site.name))
        return list(result.scalars().all())

    async def list_sites(self) -> list[Site]:
        result = await self.session.execute(select(Site).order_by(Site.name))
        return list(result.scalars().all())

    async def create(self, name: str) -> Site:
        """Register a new site.

        Raises:
            ConflictError: If a site with the same name already exists.
        """
        site = Site(id=uuid.uuid4(), name=name)
        self.session.add(site)
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise ConflictError("Conflict: Site", details={"name": name}) from None
        await self.session.refresh(site)
        logger.info(f"Created site {site.id} ({name})")
        return site
