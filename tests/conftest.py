"""
Async test configuration and fixtures for pytest.

Every test gets its own in-memory SQLite database through aiosqlite, so the
services can commit freely without leaking rows into other tests.
"""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import board.models  # noqa
from board.db.async_session import get_async_db
from board.db.base_class import Base
from board.main import app
from board.models.enums import Role
from board.models.user import User
from board.services.async_auth import AsyncAuthService
from board.services.async_comment import AsyncCommentService
from board.services.async_post import AsyncPostService

TEST_PASSWORD_HASH = "$2b$12$test_hashed_password"


@pytest.fixture(scope="session")
def async_test_db_url() -> str:
    return "sqlite+aiosqlite://"


@pytest_asyncio.fixture
async def async_engine(async_test_db_url):
    """Fresh in-memory database with every board table."""
    engine = create_async_engine(
        async_test_db_url,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def async_db_session(async_engine) -> AsyncGenerator[AsyncSession, None]:
    async_session_factory = async_sessionmaker(
        bind=async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    async with async_session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def make_user(async_db_session: AsyncSession):
    """Factory creating users directly, skipping bcrypt for speed."""

    async def _make_user(username: str, role: Role = Role.MEMBER, **kwargs) -> User:
        user = User(
            username=username,
            email=kwargs.pop("email", f"{username}@example.com"),
            nickname=kwargs.pop("nickname", username.capitalize()),
            hashed_password=TEST_PASSWORD_HASH,
            role=role,
            **kwargs,
        )
        async_db_session.add(user)
        await async_db_session.commit()
        return user

    return _make_user


@pytest_asyncio.fixture
async def author(make_user) -> User:
    return await make_user("alice")


@pytest_asyncio.fixture
async def other_user(make_user) -> User:
    return await make_user("bob")


@pytest_asyncio.fixture
async def moderator(make_user) -> User:
    return await make_user("mod", role=Role.MODERATOR)


@pytest_asyncio.fixture
async def post(async_db_session, author):
    return await AsyncPostService.create_post(
        async_db_session, title="Hello", content="First post", category="general", author=author
    )


@pytest_asyncio.fixture
async def comment(async_db_session, post, author):
    return await AsyncCommentService.create_comment(async_db_session, post.id, "Nice post", author)


@pytest.fixture
def auth_header_for():
    """Build an Authorization header with a valid JWT for a user."""

    def _auth_header_for(user: User) -> dict:
        token = AsyncAuthService.create_access_token(user.id)
        return {"Authorization": f"Bearer {token}"}

    return _auth_header_for


@pytest_asyncio.fixture
async def async_client(async_db_session):
    """FastAPI client over ASGI with the database dependency pointed at the test session."""

    async def override_get_async_db():
        yield async_db_session

    app.dependency_overrides[get_async_db] = override_get_async_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides = {}
