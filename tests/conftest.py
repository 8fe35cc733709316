"""
Test infrastructure.

- SQLite in-memory through aiosqlite; ``StaticPool`` keeps every session on
  the single connection that owns the in-memory database.
- Foreign keys are switched on per connection so the explicit delete order
  in the services is checked the way PostgreSQL would check it.
- ``get_db`` is overridden to use the test session factory; tables are
  created before and dropped after each test.
- The Redis cache stays disconnected; ``CacheManager`` then treats every
  read as a miss and skips writes.
"""
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from blog.cache import cache
from blog.database import Base, get_db
from blog.main import app
from blog.middleware import install_query_counter

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine_test = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
install_query_counter(engine_test)


@event.listens_for(engine_test.sync_engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


async_session_test = async_sessionmaker(
    engine_test,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def override_get_db():
    async with async_session_test() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def no_redis():
    cache._redis = None
    yield


@pytest_asyncio.fixture(autouse=True)
async def setup_db():
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def db_session() -> AsyncSession:
    """A session for tests that call the services directly."""
    async with async_session_test() as session:
        yield session


@pytest_asyncio.fixture
async def async_client() -> AsyncClient:
    """HTTP client wired to the app; keeps the session cookie between calls."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def user(async_client: AsyncClient) -> dict:
    resp = await async_client.post("/users", json={
        "username": "author",
        "email": "author@example.com",
    })
    assert resp.status_code == 201
    return resp.json()


@pytest_asyncio.fixture
async def article(async_client: AsyncClient, user: dict) -> dict:
    resp = await async_client.post("/articles", json={
        "title": "Hello World",
        "body": "First post",
        "user_id": user["id"],
    })
    assert resp.status_code == 201
    return resp.json()
