import os

# Settings are read at import time; these must be in place before tripboard loads
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"

from typing import Any, Dict, Optional

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import tripboard.models  # noqa: F401
from tripboard.core.database import Base, get_db
from tripboard.core.redis_lifecycle import get_cache
from tripboard.core.security import create_access_token, hash_password
from tripboard.main import app
from tripboard.models.user.user import User
from tripboard.schemas.itinerary.activity import ActivityCreate
from tripboard.schemas.itinerary.day import DayCreate
from tripboard.schemas.trip.trip_schema import TripCreate
from tripboard.services.itineraries import activity_service, day_service
from tripboard.services.trips import trip_member_service, trip_service


class FakeCache:
    """In-memory stand-in for RedisCache with the same interface."""

    def __init__(self):
        self.store: Dict[str, Any] = {}

    async def get(self, key: str) -> Optional[Any]:
        return self.store.get(key)

    async def set(self, key: str, value: Any, expire: int = 3600) -> None:
        self.store[key] = value

    async def delete(self, key: str) -> None:
        self.store.pop(key, None)

    @staticmethod
    def build_key(*args) -> str:
        return ":".join(str(arg) for arg in args)


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, expire_on_commit=False, class_=AsyncSession)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def cache():
    return FakeCache()


@pytest.fixture
async def client(session_factory, cache):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    async def override_get_cache():
        yield cache

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cache] = override_get_cache

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def make_user(db: AsyncSession, username: str) -> User:
    user = User(
        email=f"{username}@example.com",
        username=username,
        hashed_password=hash_password("password123"),
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


def auth_headers(user: User) -> dict:
    token = create_access_token({"sub": str(user.id)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def owner(db):
    return await make_user(db, "owner")


@pytest.fixture
async def editor(db):
    return await make_user(db, "editor")


@pytest.fixture
async def viewer(db):
    return await make_user(db, "viewer")


@pytest.fixture
async def outsider(db):
    return await make_user(db, "outsider")


@pytest.fixture
async def trip(db, owner, editor, viewer):
    """A trip owned by ``owner`` with one editor and one viewer."""
    new_trip = await trip_service.create_trip(db, TripCreate(title="Japan 2026"), owner.id)
    await trip_member_service.add_member(db, new_trip.id, editor.id, "editor")
    await trip_member_service.add_member(db, new_trip.id, viewer.id, "viewer")
    await db.commit()
    return new_trip


async def make_day(db: AsyncSession, user: User, trip_id: int, title: str = "Day"):
    return await day_service.create_day(db, user, DayCreate(trip_id=trip_id, title=title))


async def make_activity(
    db: AsyncSession,
    user: User,
    trip_id: int,
    title: str,
    day_id: Optional[int] = None,
    latitude: float = 35.0,
    longitude: float = 139.0,
):
    return await activity_service.create_activity(
        db,
        user,
        ActivityCreate(trip_id=trip_id, day_id=day_id, title=title, latitude=latitude, longitude=longitude),
    )
