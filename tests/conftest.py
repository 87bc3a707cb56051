"""
Test configuration and fixtures.
Uses SQLite in-memory for fast tests. Endpoint tests share the same session
through a get_db dependency override.
"""
import uuid
from unittest.mock import patch

import httpx
import pytest
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from hooklog.database import Base, enable_sqlite_foreign_keys, get_db
import hooklog.models  # noqa: F401  registers tables on Base.metadata
from hooklog.api.auth import create_access_token, hash_password
from hooklog.context import RequestContext
from hooklog.models.user import User


@pytest.fixture
async def db():
    """In-memory SQLite database for tests."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session
    await engine.dispose()


async def _make_user(db, email: str) -> User:
    user = User(id=uuid.uuid4(), email=email, password_hash=hash_password("correct-horse"))
    db.add(user)
    await db.flush()
    return user


@pytest.fixture
async def user(db):
    return await _make_user(db, "alice@example.com")


@pytest.fixture
async def other_user(db):
    return await _make_user(db, "bob@example.com")


@pytest.fixture
def ctx(user):
    return RequestContext(user_id=user.id)


@pytest.fixture
def anon():
    return RequestContext.anonymous()


@pytest.fixture
def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
def other_auth_headers(other_user):
    return {"Authorization": f"Bearer {create_access_token(other_user.id)}"}


@pytest.fixture
def app(db):
    """FastAPI app wired to the test session."""
    from hooklog.main import create_app

    with patch("hooklog.main.configure_structured_logging"):
        application = create_app()

    async def _override_get_db():
        yield db

    application.dependency_overrides[get_db] = _override_get_db
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
