import os

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["ENVIRONMENT"] = "test"

import pytest
from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool
from httpx import AsyncClient, ASGITransport

from app.main import app
from app.core.database import Base, get_db
from app.core.security import create_access_token, get_password_hash
from app.models import (
    User,
    UserRole,
    Property,
    PropertyType,
    ListingType,
    PropertyStatus,
)

TEST_DATABASE_URL = "sqlite+aiosqlite://"
TEST_PASSWORD = "TestPass123"


@pytest.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Fresh in-memory database per test"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()


@pytest.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create test client"""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def user_factory(db_session: AsyncSession):
    """Insert users directly, skipping the API"""
    counter = {"n": 0}

    async def create(role: UserRole = UserRole.USER, email: str = None, is_active: bool = True) -> User:
        counter["n"] += 1
        user = User(
            email=email or f"user{counter['n']}@example.com",
            hashed_password=get_password_hash(TEST_PASSWORD),
            role=role,
            first_name="Test",
            last_name=f"User{counter['n']}",
            is_active=is_active,
        )
        db_session.add(user)
        await db_session.flush()
        return user

    return create


@pytest.fixture
def property_factory(db_session: AsyncSession):
    """Insert properties directly, skipping the API"""

    async def create(owner: User, **overrides) -> Property:
        data = dict(
            user_id=owner.id,
            title="2-комнатная квартира, Чиланзар",
            property_type=PropertyType.APARTMENT,
            listing_type=ListingType.SALE,
            status=PropertyStatus.ACTIVE,
            price=65000,
            area=54.0,
            rooms=2,
            address="ул. Бунёдкор, 12",
            city="Tashkent",
            district="Chilanzar",
            latitude=41.2856,
            longitude=69.2034,
        )
        data.update(overrides)
        prop = Property(**data)
        db_session.add(prop)
        await db_session.flush()
        await db_session.refresh(prop)
        return prop

    return create


@pytest.fixture
def auth_headers():
    """Bearer header for a user"""

    def make(user: User) -> dict:
        return {"Authorization": f"Bearer {create_access_token(subject=str(user.id))}"}

    return make
