"""Shared fixtures for duel tests."""

from datetime import timedelta

import pytest
from fakes import CHAR_A, CHAR_B, USER_1, USER_2, FakeCharacterGateway, FrozenClock, make_snapshot
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from duel_arena.db.models import Base, Duel
from duel_arena.engine.duel import DuelEngine
from duel_arena.engine.types import Caller


@pytest.fixture
async def async_engine():
    """Create async SQLite in-memory engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
    )

    # Enable foreign keys for SQLite
    @event.listens_for(engine.sync_engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db_session(async_engine):
    """Create async session for testing with automatic rollback."""
    async_session_factory = async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def gateway() -> FakeCharacterGateway:
    """Character service with two characters owned by different users."""
    fake = FakeCharacterGateway()
    fake.add(make_snapshot(CHAR_A, USER_1))
    fake.add(make_snapshot(CHAR_B, USER_2))
    return fake


@pytest.fixture
def challenger_caller() -> Caller:
    return Caller(user_id=USER_1)


@pytest.fixture
def opponent_caller() -> Caller:
    return Caller(user_id=USER_2)


@pytest.fixture
def duel_engine(db_session: AsyncSession, gateway: FakeCharacterGateway, clock: FrozenClock) -> DuelEngine:
    return DuelEngine(db_session, gateway, duel_timeout=timedelta(minutes=5), clock=clock)


@pytest.fixture
async def duel(duel_engine: DuelEngine, challenger_caller: Caller) -> Duel:
    """An Active duel between CHAR_A (challenger) and CHAR_B, both at 30 HP."""
    return await duel_engine.challenge(challenger_caller, CHAR_A, CHAR_B)
