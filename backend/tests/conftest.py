"""Pytest configuration and fixtures for testing."""

import os

# Settings are read at import time; point the app at an in-memory database
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("ENVIRONMENT", "test")

from datetime import datetime, timedelta
from decimal import Decimal
from typing import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from taskmarket.main import app
from taskmarket.database import Base, get_db
from taskmarket.config import settings
from taskmarket.models.task import Task
from taskmarket.schemas.task import TaskCreate
from taskmarket.schemas.user import UserCreate
from taskmarket.services.access_policy import Actor
from taskmarket.services.task_service import approve_task, create_task
from taskmarket.services.user_service import create_user


TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest.fixture(scope="function")
async def db() -> AsyncGenerator[AsyncSession, None]:
    """
    Create a fresh in-memory database for each test.
    """
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestSessionLocal = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    # Create all tables
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session

    # Drop all tables after test
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await test_engine.dispose()


@pytest.fixture
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    Create test client with database dependency override.
    """
    async def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def allow_admin_signup(monkeypatch):
    monkeypatch.setattr(settings, "ALLOW_ADMIN_SIGNUP", True)


@pytest.fixture
def commission_10(monkeypatch):
    """Charge a 10% platform commission on new payments."""
    monkeypatch.setattr(settings, "PLATFORM_COMMISSION_PERCENT", Decimal("10"))


def task_payload(**overrides) -> dict:
    """JSON body for posting a task."""
    payload = {
        "title": "Label 200 product photos",
        "description": "Tag each photo with category and color",
        "required_skills": ["labeling", "english"],
        "category": "Data",
        "duration": 2,
        "payment_amount": "100.00",
        "deadline": (datetime.utcnow() + timedelta(days=5)).isoformat(),
        "number_of_workers": 1,
    }
    payload.update(overrides)
    return payload


async def register(client: AsyncClient, role: str, name: str) -> tuple[dict, str]:
    """
    Register a user over HTTP.

    Returns:
        Tuple of (registration data, api_key)
    """
    response = await client.post(
        "/api/users",
        json={"name": name, "email": f"{name.lower()}@example.com", "role": role}
    )
    assert response.status_code == 201, response.text
    data = response.json()
    return data, data["api_key"]


@pytest.fixture
async def company_user(client: AsyncClient) -> tuple[dict, str]:
    return await register(client, "company", "Acme")


@pytest.fixture
async def worker_user(client: AsyncClient) -> tuple[dict, str]:
    return await register(client, "worker", "Wanda")


@pytest.fixture
async def admin_user(client: AsyncClient, allow_admin_signup) -> tuple[dict, str]:
    return await register(client, "admin", "Root")


# Service-level fixtures

async def make_actor(db: AsyncSession, role: str, name: str) -> Actor:
    user, _ = await create_user(
        db,
        UserCreate(name=name, email=f"{name.lower()}@example.com", role=role)
    )
    return Actor.from_user(user)


@pytest.fixture
async def company(db: AsyncSession) -> Actor:
    return await make_actor(db, "company", "Globex")


@pytest.fixture
async def other_company(db: AsyncSession) -> Actor:
    return await make_actor(db, "company", "Initech")


@pytest.fixture
async def worker(db: AsyncSession) -> Actor:
    return await make_actor(db, "worker", "Walter")


@pytest.fixture
async def other_worker(db: AsyncSession) -> Actor:
    return await make_actor(db, "worker", "Olga")


@pytest.fixture
async def admin(db: AsyncSession, allow_admin_signup) -> Actor:
    return await make_actor(db, "admin", "Ada")


def new_task(**overrides) -> TaskCreate:
    fields = {
        "title": "Transcribe interview",
        "description": "Transcribe a 20 minute interview",
        "required_skills": ["transcription"],
        "category": "Writing",
        "duration": 2,
        "payment_amount": Decimal("100.00"),
        "deadline": datetime.utcnow() + timedelta(days=3),
        "number_of_workers": 1,
    }
    fields.update(overrides)
    return TaskCreate(**fields)


@pytest.fixture
async def open_task(db: AsyncSession, company: Actor, admin: Actor) -> Task:
    """A task posted by `company` and approved by `admin`."""
    task = await create_task(db, company, new_task())
    return await approve_task(db, task.id, admin)
