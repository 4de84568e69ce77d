"""
SQLAlchemy 2.0 Database Configuration

Async engine, session factory and table management for the entity store.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import structlog
from sqlalchemy import event, select, text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from socialgraph.service.settings import settings

logger = structlog.get_logger(__name__)


# ==========================================
# SQLAlchemy 2.0 Declarative Base
# ==========================================


class Base(DeclarativeBase):
    """Base class for all database models using SQLAlchemy 2.0 declarative mapping."""

    pass


# ==========================================
# Engine and Session Management
# ==========================================


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    # SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_async_engine(url: str, **kwargs: Any) -> AsyncEngine:
    """Create an async engine for ``url`` with backend-specific options."""
    backend = make_url(url).get_backend_name()

    if backend == "sqlite":
        kwargs.setdefault("connect_args", {"check_same_thread": False})
        if ":memory:" in url or url.endswith("://"):
            kwargs.setdefault("poolclass", StaticPool)
        engine = create_async_engine(url, **kwargs)
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    kwargs.setdefault("pool_size", settings.database.pool_size)
    kwargs.setdefault("max_overflow", settings.database.max_overflow)
    kwargs.setdefault("pool_pre_ping", settings.database.pool_pre_ping)
    return create_async_engine(url, **kwargs)


def build_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create a session factory bound to ``engine``."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )


# Create engines (lazy initialization)
_async_engine: AsyncEngine | None = None
_async_session_maker: async_sessionmaker[AsyncSession] | None = None


def get_async_engine() -> AsyncEngine:
    """Get or create the asynchronous engine."""
    global _async_engine
    if _async_engine is None:
        _async_engine = build_async_engine(
            settings.database.sqlalchemy_url, echo=settings.database.echo
        )
    return _async_engine


def get_session_maker() -> async_sessionmaker[AsyncSession]:
    """Get or create the session factory."""
    global _async_session_maker
    if _async_session_maker is None:
        _async_session_maker = build_session_maker(get_async_engine())
    return _async_session_maker


async def dispose_engine() -> None:
    """Close pooled connections and forget the global engine."""
    global _async_engine, _async_session_maker
    if _async_engine is not None:
        await _async_engine.dispose()
    _async_engine = None
    _async_session_maker = None


# ==========================================
# Session Context Managers
# ==========================================


@asynccontextmanager
async def get_async_db() -> AsyncIterator[AsyncSession]:
    """Get an asynchronous database session."""
    async with get_session_maker()() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def get_async_session() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency for getting an async database session."""
    async with get_session_maker()() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


# ==========================================
# Database Initialization
# ==========================================


async def create_all_tables_async(engine: AsyncEngine | None = None) -> None:
    """Create all tables in the database asynchronously."""
    import socialgraph.service.models  # noqa: F401

    engine = engine or get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_all_tables_async(engine: AsyncEngine | None = None) -> None:
    """Drop all tables from the database asynchronously. Use with caution!"""
    engine = engine or get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def seed_member_types(session: AsyncSession) -> int:
    """Insert the fixed member types that are missing. Returns the number inserted."""
    from socialgraph.service.models import MEMBER_TYPE_SEED, MemberType

    existing = set((await session.execute(select(MemberType.id))).scalars())
    missing = [row for row in MEMBER_TYPE_SEED if row["id"] not in existing]
    session.add_all(MemberType(**row) for row in missing)
    await session.commit()
    return len(missing)


async def init_db(engine: AsyncEngine | None = None) -> None:
    """Initialize the database (create tables and seed reference data)."""
    engine = engine or get_async_engine()
    await create_all_tables_async(engine)
    async with build_session_maker(engine)() as session:
        inserted = await seed_member_types(session)
    logger.info("database.initialized", member_types_seeded=inserted)


# ==========================================
# Health Check
# ==========================================


async def check_database_health() -> bool:
    """Check if the database is accessible."""
    try:
        async with get_async_db() as session:
            await session.execute(text("SELECT 1"))
        return True
    except Exception as exc:
        logger.warning("database.health_check.failed", error=str(exc))
        return False


__all__ = [
    "Base",
    "build_async_engine",
    "build_session_maker",
    "get_async_engine",
    "get_session_maker",
    "dispose_engine",
    "get_async_db",
    "get_async_session",
    "create_all_tables_async",
    "drop_all_tables_async",
    "seed_member_types",
    "init_db",
    "check_database_health",
]
