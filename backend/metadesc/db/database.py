"""
Database connection and session management.
"""

from collections.abc import AsyncGenerator
from pathlib import Path
from typing import Any

import structlog
from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from metadesc.core.config import settings
from metadesc.core.exceptions import DatabaseError

logger = structlog.get_logger()


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""

    pass


def _engine_kwargs() -> dict[str, Any]:
    """Engine options per backend. SQLite has no connection pool settings."""
    if settings.is_sqlite:
        return {"echo": settings.debug}
    return {
        "echo": settings.debug,
        "pool_size": settings.database_pool_size,
        "max_overflow": settings.database_max_overflow,
        "pool_pre_ping": True,
        "pool_recycle": 3600,
        "connect_args": {
            "command_timeout": 60,
            "server_settings": {
                "application_name": settings.app_name.lower().replace(" ", "_"),
            },
        },
    }


def _ensure_sqlite_directory() -> None:
    """Create the parent directory of a file-backed SQLite database."""
    if not settings.is_sqlite:
        return
    database = make_url(settings.database_url).database
    if database and database != ":memory:":
        Path(database).parent.mkdir(parents=True, exist_ok=True)


engine = create_async_engine(settings.database_url, **_engine_kwargs())
async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting database session with proper error handling."""
    session = async_session_maker()
    try:
        yield session
    except OperationalError as e:
        logger.error("Database operational error", error=str(e))
        await session.rollback()
        raise DatabaseError("Database connection failed. Please try again later.", original_error=e) from e
    except SQLAlchemyError as e:
        logger.error("Database error", error=str(e))
        await session.rollback()
        raise DatabaseError("Database operation failed", original_error=e) from e
    except Exception:
        # Route errors propagate to the exception handlers uncommitted
        await session.rollback()
        raise
    finally:
        await session.close()


async def init_db() -> None:
    """Initialize database tables."""
    # Models must be imported so their tables are registered on Base.metadata
    from metadesc.db import models  # noqa: F401

    _ensure_sqlite_directory()
    try:
        async with engine.begin() as conn:
            await conn.run_sync(lambda sync_conn: Base.metadata.create_all(sync_conn, checkfirst=True))
        logger.info("Database tables initialized")
    except Exception as e:
        error_str = str(e)
        # Another worker created the tables between our check and create
        if "already exists" in error_str or "duplicate key value" in error_str:
            logger.info("Database tables already created by another worker")
        else:
            logger.error("Failed to initialize database", error=error_str)
            raise


async def drop_db() -> None:
    """Drop all tables. Used by tests."""
    from metadesc.db import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def close_db() -> None:
    """Close database connections."""
    await engine.dispose()


async def check_database_health() -> bool:
    """Check database connectivity and health"""
    try:
        async with engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error("Database health check failed", error=str(e))
        return False
