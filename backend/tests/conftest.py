"""Shared fixtures: in-memory database, per-user services and an API client."""
import random

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

import vocabdash.models  # noqa: F401  (registers tables)
from vocabdash.database import get_session
from vocabdash.main import app
from vocabdash.models.user import User
from vocabdash.services.history_log import HistoryLog
from vocabdash.services.quiz import QuizSessionRegistry, get_quiz_registry
from vocabdash.services.word_store import WordStore


@pytest.fixture
async def engine():
    """Fresh in-memory SQLite database shared by every connection of the test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
async def user(session):
    user = User(email="learner@example.com", hashed_password="not-a-real-hash")
    session.add(user)
    await session.commit()
    return user


@pytest.fixture
async def other_user(session):
    user = User(email="someone-else@example.com", hashed_password="not-a-real-hash")
    session.add(user)
    await session.commit()
    return user


@pytest.fixture
def store(session, user):
    return WordStore(session, user.id)


@pytest.fixture
def history(session, user):
    return HistoryLog(session, user.id)


@pytest.fixture
def registry():
    return QuizSessionRegistry(random.Random(7))


@pytest.fixture
async def client(session_maker, registry):
    """API client wired to the in-memory database and a seeded quiz registry."""

    async def override_get_session():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_quiz_registry] = lambda: registry
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
async def auth_headers(client):
    """Register and log in a user; returns the Authorization header."""
    credentials = {"email": "api-user@example.com", "password": "correct horse"}
    response = await client.post("/api/auth/register", json=credentials)
    assert response.status_code == 201
    response = await client.post("/api/auth/login", json=credentials)
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}
