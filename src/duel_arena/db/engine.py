"""Async database engine and session factory."""

from collections.abc import AsyncGenerator
from functools import lru_cache

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from duel_arena.config import get_settings


def create_engine() -> AsyncEngine:
    """Create async database engine."""
    settings = get_settings()
    return create_async_engine(
        settings.database_url,
        echo=settings.debug,
    )


@lru_cache
def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get the process-wide session factory, creating the engine on first use."""
    return async_sessionmaker(
        create_engine(),
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting async database session."""
    async with get_session_factory()() as session:
        yield session
