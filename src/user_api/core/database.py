"""Process-wide async engine and session factory.

``init_engine`` runs once from the app lifespan or a CLI command;
request handlers reach the store only through ``get_session_factory``.
"""

from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

POOL_SIZE = 10
MAX_OVERFLOW = 5

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def get_engine() -> AsyncEngine:
    """Return the engine created by ``init_engine``.

    Raises:
        RuntimeError: If ``init_engine`` has not run.
    """
    if _engine is None:
        msg = "Database engine not initialized. Call init_engine() first."
        raise RuntimeError(msg)
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Return the session factory bound to the current engine.

    Raises:
        RuntimeError: If ``init_engine`` has not run.
    """
    if _session_factory is None:
        msg = "Session factory not initialized. Call init_engine() first."
        raise RuntimeError(msg)
    return _session_factory


def init_engine(database_url: str, *, echo: bool = False) -> AsyncEngine:
    """Create the engine and session factory for ``database_url``.

    Server databases get a bounded connection pool; SQLite keeps
    SQLAlchemy's default pool.

    Args:
        database_url: Async connection string (postgresql+asyncpg or sqlite+aiosqlite).
        echo: Log every SQL statement.

    Returns:
        The created engine.
    """
    global _engine, _session_factory  # noqa: PLW0603
    options: dict[str, Any] = {"echo": echo}
    if make_url(database_url).get_backend_name() != "sqlite":
        options.update(pool_size=POOL_SIZE, max_overflow=MAX_OVERFLOW)
    _engine = create_async_engine(database_url, **options)
    # Services read attributes after commit without reloading
    _session_factory = async_sessionmaker(_engine, expire_on_commit=False)
    return _engine


async def dispose_engine() -> None:
    """Close pooled connections and forget the engine. Safe to call twice."""
    global _engine, _session_factory  # noqa: PLW0603
    if _engine is None:
        return
    await _engine.dispose()
    _engine = None
    _session_factory = None
