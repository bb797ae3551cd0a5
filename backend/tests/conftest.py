"""
Scrum Chatter Backend: Test Configuration (conftest.py)
=========================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Points the application at a throwaway SQLite file, creates the schema
       per test, and exposes sessions, mocks and an HTTP client.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── database: Empty schema in the test SQLite file, dropped afterwards
    ├── db_session: AsyncSession on the test database
    ├── team_id: A committed team to put members into
    ├── mock_db_session: Mock database session (no real DB needed)
    ├── mock_session_factory: Session factory yielding mock_db_session
    ├── executor: BackgroundExecutor without retry delays
    └── test_client: HTTPX AsyncClient for API endpoint testing
"""

import os
import tempfile
from unittest.mock import AsyncMock, MagicMock

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Must run before the first scrumchatter import: settings are read once
_db_dir = tempfile.mkdtemp(prefix="scrumchatter_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_db_dir, 'test.db')}"
os.environ["DB_AUTO_CREATE"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["MUTATION_RETRY_MIN_WAIT"] = "0"
os.environ["MUTATION_RETRY_MAX_WAIT"] = "0.1"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from scrumchatter.database import Base, async_session_factory, engine, init_models, session_scope  # noqa: E402
from scrumchatter.dialogs.registry import dialog_registry  # noqa: E402
from scrumchatter.services.background import BackgroundExecutor, background_executor  # noqa: E402
from scrumchatter.services.team_service import team_service  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def database():
    """
    Fresh schema for one test.

    Background jobs and open dialogs left by the test are settled before
    the tables are dropped.
    """
    await init_models()
    yield engine
    await background_executor.drain()
    dialog_registry.clear()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(database):
    """
    Session on the test database.

    Usage:
        async def test_create(db_session, team_id):
            member = await member_service.create_member(db_session, team_id, "Bob")
    """
    async with async_session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def team_id(database) -> int:
    """Id of a committed team named 'Core'."""
    async with session_scope() as db:
        team = await team_service.create_team(db, "Core")
        return team.id


# ══════════════════════════════════════════════════════════════════════════
# Mock Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        mock_db_session.execute.return_value.scalar.return_value = 0
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def mock_session_factory(mock_db_session):
    """
    Stand-in for async_sessionmaker: `factory()` is an async context
    manager yielding mock_db_session.
    """
    session_cm = MagicMock()
    session_cm.__aenter__ = AsyncMock(return_value=mock_db_session)
    session_cm.__aexit__ = AsyncMock(return_value=False)
    return MagicMock(return_value=session_cm)


@pytest.fixture
def executor():
    """BackgroundExecutor retrying three times without waiting."""
    return BackgroundExecutor(max_attempts=3, min_wait=0, max_wait=0)


# ══════════════════════════════════════════════════════════════════════════
# HTTP Client
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client(database):
    """
    Provides an async HTTP test client for endpoint testing.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from scrumchatter.main import app
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
