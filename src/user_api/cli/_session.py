"""Engine lifecycle for one-shot CLI commands."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession

from user_api.core.config import Settings


@asynccontextmanager
async def cli_session(settings: Settings) -> AsyncGenerator[AsyncSession]:
    """Initialise the engine, yield one session, and dispose the engine."""
    from user_api.core.database import dispose_engine, get_session_factory, init_engine

    init_engine(settings.database_url)
    try:
        factory = get_session_factory()
        async with factory() as session:
            yield session
    finally:
        await dispose_engine()
