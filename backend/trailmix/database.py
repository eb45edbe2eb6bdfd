"""
TrailMix Backend: Database Session Management
===============================================

What:  Async SQLAlchemy engine construction, declarative base, and the
       per-request session dependency.
How:   The application lifespan opens one pooled engine at startup and
       stores it (with its session factory) on `app.state`. Each request
       gets its own session that commits on success and rolls back on error.
       The engine is disposed at shutdown.
Who:   Used by route handlers via FastAPI's dependency injection system.

Connection Pooling:
    pool_size + max_overflow bound the number of concurrent connections.
    pool_pre_ping validates a connection before handing it out.
    pool_recycle=3600 replaces connections older than an hour.
"""

import logging
from contextlib import contextmanager
from typing import Any, AsyncGenerator, Dict, Iterator, Optional

from fastapi import Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from trailmix.config import settings
from trailmix.exceptions import DatabaseError

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object, which Alembic reads for autogenerate
    and the test suite uses for `create_all`.
    """
    pass


def _engine_options(database_url: str) -> Dict[str, Any]:
    """Pool options for the configured URL (SQLite pools take no sizing)."""
    options: Dict[str, Any] = {"echo": settings.log_level == "DEBUG"}
    if database_url.startswith("sqlite"):
        return options
    options.update(
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=settings.db_pool_pre_ping,
        pool_recycle=3600,
    )
    return options


def create_engine(database_url: Optional[str] = None) -> AsyncEngine:
    """Create the async engine for `database_url` (defaults to settings)."""
    url = database_url or settings.database_url
    return create_async_engine(url, **_engine_options(url))


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Session factory bound to `engine`.

    expire_on_commit=False keeps loaded attributes readable after the
    dependency commits.
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory opened at startup
        2. Yields it to the route handler
        3. On success: commits the transaction
        4. On error: rolls back and re-raises for the global handlers
        5. Always: closes the session (returns connection to pool)

    Example usage in a route:
        @router.get("/trails")
        async def list_trails(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    session_factory = request.app.state.session_factory
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def dispose_engine(engine: AsyncEngine) -> None:
    """
    What:  Closes all connections in the pool.
    When:  Called during application shutdown (lifespan handler).
    """
    await engine.dispose()


@contextmanager
def translate_db_errors(action: str, **context: Any) -> Iterator[None]:
    """
    Re-raise driver/ORM failures inside the block as DatabaseError.

    Application exceptions pass through untouched. The original error is
    logged with `context`; the client only sees the generic message.

    Example:
        with translate_db_errors("fetching trail", trail_id=trail_id):
            result = await db.execute(select(Trail).where(...))
    """
    try:
        yield
    except SQLAlchemyError as e:
        logger.error("Database error while %s: %s", action, str(e), exc_info=True)
        raise DatabaseError(context={"action": action, **context}) from e
