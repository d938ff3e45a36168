"""
Async Database Layer
SQLAlchemy 2.0 engine, session factory and FastAPI session dependency
"""
from typing import Any, AsyncGenerator, Dict

from loguru import logger
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool

from .config import Settings, settings


# Base class for ORM models
Base = declarative_base()


def engine_options(settings: Settings) -> Dict[str, Any]:
    """Pool options: pooled for PostgreSQL, unpooled for SQLite and debug runs"""
    options: Dict[str, Any] = {"echo": settings.DEBUG, "pool_pre_ping": True}

    if settings.DEBUG or settings.DATABASE_URL.startswith("sqlite"):
        options["poolclass"] = NullPool
        return options

    options.update(
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
    )
    return options


def build_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine; no connection is opened until first use"""
    return create_async_engine(settings.DATABASE_URL, **engine_options(settings))


engine: AsyncEngine = build_engine(settings)

SessionFactory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency yielding one session per request

    The session commits when the request handler returns and rolls
    back when it raises.
    """
    async with SessionFactory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db():
    """Create missing tables for every registered model"""
    import infrastructure.persistence.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db():
    await engine.dispose()


async def health_check() -> bool:
    """True when the database answers a trivial query"""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.warning(f"Database health check failed: {e}")
        return False
