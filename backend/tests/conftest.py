"""Shared test fixtures with a file-backed SQLite database."""
import tempfile
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.pool import NullPool

from app.models import Base, User
from app.main import app
from app.dependencies import get_session_factory
from app.services.analytics_service import MetricQueryEngine
from tests.factories import create_user

# --- SQLite compatibility: compile PostgreSQL types for SQLite ---

@compiles(UUID, "sqlite")
def _compile_uuid_sqlite(type_, compiler, **kw):
    return "VARCHAR(36)"


# File-backed so concurrent sessions (one per metric task) see the same data.
# NullPool keeps connections from leaking across per-test event loops.
_DB_PATH = Path(tempfile.mkdtemp(prefix="content-analytics-")) / "test.db"
TEST_DATABASE_URL = f"sqlite+aiosqlite:///{_DB_PATH}"

test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)
test_session_factory = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@event.listens_for(test_engine.sync_engine, "connect")
def _set_sqlite_pragma(dbapi_connection, _connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture(autouse=True)
async def setup_db():
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


app.dependency_overrides[get_session_factory] = lambda: test_session_factory


@pytest.fixture
async def client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def db_session():
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def session_factory() -> async_sessionmaker[AsyncSession]:
    return test_session_factory


@pytest.fixture
def engine() -> MetricQueryEngine:
    return MetricQueryEngine(test_session_factory, fetch_timeout=5.0)


@pytest.fixture
async def owner(db_session: AsyncSession) -> User:
    user, _ = await create_user(db_session)
    return user


@pytest.fixture
async def owner_auth(db_session: AsyncSession) -> tuple[User, dict]:
    """Return (owner, auth_headers)."""
    user, token = await create_user(db_session)
    return user, {"Authorization": f"Bearer {token}"}
