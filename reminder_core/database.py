"""
Database access for scheduled reminder tasks.

Three consumers share one DATABASE_URL with different drivers:
- the service itself (async, asyncpg)
- Alembic migrations (sync, psycopg2)
- the APScheduler job store (sync, psycopg2, with a connect timeout)
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

from .config import get_database_url, is_sql_echo

logger = logging.getLogger(__name__)

_engine: AsyncEngine | None = None

# Connections are held only for the insert and the final update
POOL_SIZE = 5
MAX_OVERFLOW = 5


def _with_driver(database_url: str, driver: str | None) -> str:
    """
    Rewrite the scheme of a PostgreSQL URL for the given driver.

    postgres://, postgresql:// and postgresql+<any>:// are all accepted.
    """
    scheme, sep, rest = database_url.partition("://")
    if not sep or scheme.split("+")[0] not in ("postgres", "postgresql"):
        raise ValueError(f"DATABASE_URL is not a PostgreSQL URL: {scheme}://...")
    if driver:
        return f"postgresql+{driver}://{rest}"
    return f"postgresql://{rest}"


def get_async_database_url() -> str:
    database_url = get_database_url()
    if not database_url:
        raise ValueError("DATABASE_URL environment variable must be set.")
    return _with_driver(database_url, "asyncpg")


def get_sync_database_url(connect_timeout: int | None = None) -> str:
    """
    psycopg2 URL for Alembic and the APScheduler job store.

    Args:
        connect_timeout: Seconds before a connection attempt gives up, so an
            unreachable database fails fast instead of hanging startup
    """
    database_url = get_database_url()
    if not database_url:
        raise ValueError("DATABASE_URL must be set for sync database access")

    url = _with_driver(database_url, None)
    if connect_timeout is not None and "connect_timeout" not in url:
        url += "&" if "?" in url else "?"
        url += f"connect_timeout={connect_timeout}"
    return url


def get_engine() -> AsyncEngine:
    """Get or create the async SQLAlchemy engine singleton."""
    global _engine
    if _engine is None:
        _engine = create_async_engine(
            get_async_database_url(),
            echo=is_sql_echo(),
            pool_size=POOL_SIZE,
            max_overflow=MAX_OVERFLOW,
            pool_timeout=30,
            pool_pre_ping=True,
            pool_recycle=1800,  # Recycle connections every 30 minutes
        )
    return _engine


@asynccontextmanager
async def get_connection() -> AsyncGenerator[AsyncConnection, None]:
    """Read-only access; nothing is committed."""
    engine = get_engine()
    async with engine.connect() as conn:
        yield conn


@asynccontextmanager
async def get_transaction() -> AsyncGenerator[AsyncConnection, None]:
    """
    Connection inside a transaction.

    Commits when the block exits normally, rolls back on exception. The task
    insert and the final handle update each run in their own transaction so
    the insert is committed before any trigger exists.
    """
    engine = get_engine()
    async with engine.begin() as conn:
        yield conn


async def check_connection() -> bool:
    """True if the database answers a trivial query."""
    try:
        async with get_connection() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning(f"Database health check failed: {e!r}")
        return False
    return True


async def close_engine() -> None:
    """Close the engine and all connections. Call on shutdown."""
    global _engine
    if _engine is not None:
        await _engine.dispose()
        _engine = None
