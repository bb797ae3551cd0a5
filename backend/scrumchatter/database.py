"""
Scrum Chatter Backend: Database Session Management
===================================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
How:   Creates an async engine, provides a session dependency that
       auto-commits on success and auto-rolls-back on error, and a
       `session_scope()` helper with the same semantics for work that runs
       outside a request (dialog validators, background mutations).
Who:   Route handlers via FastAPI's Depends(); the background executor and
       validators via session_scope().
When:  Engine is created at module import; sessions are created per unit of work.

Connection Pooling:
    PostgreSQL (asyncpg):  pool_size / max_overflow / pre_ping from settings,
                           connections recycled every hour.
    SQLite (aiosqlite):    NullPool; every unit of work opens its own
                           connection, so nothing is shared between event loops.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, AsyncIterator, Dict, Optional

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

from scrumchatter.config import settings


def _engine_options() -> Dict[str, Any]:
    options: Dict[str, Any] = {"echo": settings.log_level == "DEBUG"}
    if settings.is_sqlite:
        options["poolclass"] = NullPool
    else:
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return options


# ── Engine Configuration ──────────────────────────────────────────────────
engine = create_async_engine(settings.database_url, **_engine_options())

# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: attributes stay readable after commit, outside the
# session that loaded them
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    All models inherit from this class to register with the shared metadata
    used by Alembic and by init_models().
    """
    pass


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the route handler
        3. On success: commits the transaction
        4. On error: rolls back the transaction and re-raises
        5. Always: closes the session (returns connection to pool)

    Example usage in a route:
        @router.get("/teams")
        async def list_teams(db: AsyncSession = Depends(get_db_session)):
            return await team_service.list_teams(db)
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


@asynccontextmanager
async def session_scope(
    factory: Optional[async_sessionmaker] = None,
) -> AsyncIterator[AsyncSession]:
    """
    Transactional scope for one unit of background work.

    Same commit/rollback contract as get_db_session(), usable with
    `async with`. `factory` defaults to the application session factory.
    """
    factory = factory or async_session_factory
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def init_models() -> None:
    """
    Create any missing tables from the ORM metadata.

    When:  App startup with DB_AUTO_CREATE=true (local SQLite development).
    Production schemas are managed by Alembic instead.
    """
    # Register every model with Base.metadata before create_all
    from scrumchatter.models import member, meeting, team  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    """Gracefully closes all connections in the pool (app shutdown)."""
    await engine.dispose()
