"""Shared test fixtures and configuration."""

import json
import os
from typing import Any, AsyncGenerator, Dict

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

# Set test environment before importing app modules
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["OPENAI_API_KEY"] = "test-key"
os.environ["STEP_DELAY_SECONDS"] = "0"
os.environ["DEBUG"] = "false"

from pollsim.main import app
from pollsim.api.dependencies import get_analysis_generator, get_question_answerer
from pollsim.api.websocket.progress_handler import ConnectionManager, get_connection_manager
from pollsim.core.analysis_generator import AnalysisGenerator
from pollsim.core.question_answerer import QuestionAnswerer
from pollsim.db.database import Base, get_db
from pollsim.services.rate_limiter import RateLimiter
from tests.helpers import FakeProvider, make_survey


@pytest.fixture
def survey_data() -> Dict[str, Any]:
    """Survey with one persona and one question."""
    return make_survey()


@pytest.fixture
def survey_json(survey_data) -> str:
    return json.dumps(survey_data)


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def rate_limiter() -> RateLimiter:
    return RateLimiter(limit=50)


@pytest.fixture
def generator(fake_provider, rate_limiter) -> AnalysisGenerator:
    return AnalysisGenerator(
        provider=fake_provider,
        rate_limiter=rate_limiter,
        step_delay=0,
    )


@pytest.fixture
def answerer(fake_provider, rate_limiter) -> QuestionAnswerer:
    return QuestionAnswerer(provider=fake_provider, rate_limiter=rate_limiter)


@pytest.fixture
def connection_manager() -> ConnectionManager:
    return ConnectionManager()


@pytest.fixture
async def async_engine():
    """Create async engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(async_engine):
    return async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
async def db_session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def client(
    session_maker,
    generator,
    answerer,
    connection_manager,
) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with overridden database and LLM services."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_analysis_generator] = lambda: generator
    app.dependency_overrides[get_question_answerer] = lambda: answerer
    app.dependency_overrides[get_connection_manager] = lambda: connection_manager

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
