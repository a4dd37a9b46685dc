"""
Test fixtures for the Auth & Lookup API test suite.

  - db_engine / db_session: Fresh in-memory SQLite database for each test
  - client: Async HTTP test client wired to the test database
  - registered_user: Credentials of a user created through POST /register
  - documents: A few document_details rows, including an extra column
  - live_client: Client for the app started through its lifespan, backed by
    a file SQLite database with a real connection pool

Key design decisions:
  - In-memory SQLite (sqlite+aiosqlite://) is used for speed and isolation.
    Each test gets a completely fresh database — no state leaks between tests.
  - We override FastAPI's get_db dependency to inject sessions bound to the
    test engine, so the application code runs exactly as in production.
    The lifespan (and with it the production engine) is not started.
  - document_details gets an extra column via ALTER TABLE to mirror real
    deployments, where the table carries fields the ORM does not map.
"""

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import text
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from auth_lookup.config import settings
from auth_lookup.database import Base, get_db
from auth_lookup.main import app, lifespan


# In-memory SQLite for fast, isolated tests
TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest_asyncio.fixture
async def db_engine():
    """Create a fresh async engine with all tables for each test."""
    engine = create_async_engine(TEST_DATABASE_URL)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        await conn.execute(
            text("ALTER TABLE document_details ADD COLUMN required_fields TEXT")
        )
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine):
    """Provide an async session bound to the test engine."""
    async_session = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with async_session() as session:
        yield session


@pytest_asyncio.fixture
async def client(db_engine):
    """
    Async HTTP test client with the test database injected.

    This overrides the get_db dependency so all requests hit the
    in-memory test database instead of the real one.
    """
    async_session = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async def override_get_db():
        async with async_session() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def registered_user(client):
    """Register a user through the real endpoint and return its credentials."""
    credentials = {"email": "a@x.com", "password": "secret"}
    response = await client.post("/register", json=credentials)
    assert response.status_code == 201, f"Registration failed: {response.text}"
    return {**credentials, "user_id": response.json()["userId"]}


@pytest_asyncio.fixture
async def documents(db_session):
    """Seed document_details with a handful of rows."""
    rows = [
        {"country": "US", "document_type": "passport", "required_fields": "name,dob,photo"},
        {"country": "US", "document_type": "drivers_license", "required_fields": "name,address"},
        {"country": "FR", "document_type": "passport", "required_fields": "nom,date_naissance"},
    ]
    await db_session.execute(
        text(
            "INSERT INTO document_details (country, document_type, required_fields) "
            "VALUES (:country, :document_type, :required_fields)"
        ),
        rows,
    )
    await db_session.commit()
    return rows


class FailingSession:
    """
    Stand-in for AsyncSession whose database calls all fail.

    Used to exercise the 500 paths and to prove that validation failures
    never reach the database (``calls`` stays empty).
    """

    def __init__(self, error: Exception):
        self.error = error
        self.calls: list[str] = []

    def add(self, instance):
        self.calls.append("add")

    async def execute(self, *args, **kwargs):
        self.calls.append("execute")
        raise self.error

    async def flush(self, *args, **kwargs):
        self.calls.append("flush")
        raise self.error

    async def commit(self):
        pass

    async def rollback(self):
        pass


@pytest.fixture
def failing_session():
    """Install a FailingSession as the get_db dependency for one test."""
    session = FailingSession(
        OperationalError("SELECT 1", {}, Exception("server closed the connection"))
    )

    async def override_get_db():
        yield session

    app.dependency_overrides[get_db] = override_get_db
    yield session
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def failing_client(failing_session):
    """HTTP client whose requests all get a FailingSession."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest_asyncio.fixture
async def live_client(tmp_path, monkeypatch):
    """
    HTTP client for the app started through its real lifespan.

    Uses a file-backed SQLite database, so requests get separate pooled
    connections (unlike the single shared connection of the in-memory engine)
    and app.state.engine is the engine the requests actually use.
    """
    monkeypatch.setattr(settings, "DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'live.db'}")
    monkeypatch.setattr(settings, "CREATE_TABLES", True)
    app.dependency_overrides.clear()

    async with lifespan(app):
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as ac:
            yield ac
