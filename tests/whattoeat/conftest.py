"""Shared fixtures for asynchronous database access and seeded favorites data."""

from __future__ import annotations

from collections.abc import AsyncIterator
from datetime import UTC, datetime, timedelta

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from whattoeat.db.models import Base, Meal, Restaurant, User

SEED_TIME = datetime(2024, 1, 1, tzinfo=UTC)


@pytest_asyncio.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    """Provide an in-memory SQLite engine with every table created."""
    pytest.importorskip("aiosqlite")
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        future=True,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    """Provide a session bound to the in-memory engine."""
    session_factory = async_sessionmaker(engine, expire_on_commit=False)
    async with session_factory() as db_session:
        yield db_session
        if db_session.in_transaction():
            await db_session.rollback()


class Seeder:
    """Insert users and items with predictable ids and creation times."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._tick = 0

    def _next_time(self) -> datetime:
        self._tick += 1
        return SEED_TIME + timedelta(minutes=self._tick)

    async def user(self, username: str) -> User:
        user = User(username=username, email=f"{username}@example.com")
        self._session.add(user)
        await self._session.flush()
        return user

    async def meal(self, owner: User, name: str, *, is_favorite: bool = False) -> Meal:
        meal = Meal(
            user_id=owner.id,
            name=name,
            cuisine_type="italian",
            difficulty_level="easy",
            prep_time=20,
            is_favorite=is_favorite,
            created_at=self._next_time(),
        )
        self._session.add(meal)
        await self._session.flush()
        return meal

    async def restaurant(
        self, owner: User, name: str, *, is_favorite: bool = False
    ) -> Restaurant:
        restaurant = Restaurant(
            user_id=owner.id,
            name=name,
            cuisine_type="thai",
            price_range="$$",
            rating=4.5,
            is_favorite=is_favorite,
            created_at=self._next_time(),
        )
        self._session.add(restaurant)
        await self._session.flush()
        return restaurant


@pytest.fixture
def seed(session: AsyncSession) -> Seeder:
    return Seeder(session)
