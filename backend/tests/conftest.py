"""
Shared fixtures: in-memory database, test settings and an ASGI client
"""
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from core.config import Settings, get_settings
from core.database import Base, get_db
import infrastructure.persistence.models  # noqa: F401
from infrastructure.persistence.models import UserModel
from infrastructure.security.password_hasher import BcryptPasswordHasher
from presentation.api.container import get_password_hasher
from main import app


def make_settings(**overrides) -> Settings:
    values = {
        "ENVIRONMENT": "test",
        "APP_URL": "http://localhost:3000",
        "DATABASE_URL": "sqlite+aiosqlite://",
        "LOG_FILE_PATH": None,
        "ANTHROPIC_API_KEY": None,
        "OAUTH_STATE_SECRET": "test-oauth-state-secret",
        "SOCIAL_ENCRYPTION_KEY": "",
        "GITHUB_CLIENT_ID": "gh-client-id",
        "GITHUB_CLIENT_SECRET": "gh-client-secret",
        "LINKEDIN_CLIENT_ID": "li-client-id",
        "LINKEDIN_CLIENT_SECRET": "li-client-secret",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def test_settings() -> Settings:
    return make_settings()


@pytest_asyncio.fixture
async def session_factory():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def client(test_settings, session_factory):
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_db] = override_get_db
    # Low bcrypt cost keeps sign-up tests fast
    app.dependency_overrides[get_password_hasher] = lambda: BcryptPasswordHasher(rounds=4)

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def user(session_factory) -> UserModel:
    """A user with a filled-in CV profile"""
    async with session_factory() as session:
        model = UserModel(
            id=str(uuid4()),
            name="Ada Lovelace",
            email=f"ada-{uuid4().hex[:8]}@example.com",
            location="London",
            summary="Backend engineer",
            experience="10 years of Python",
            skills="Python, FastAPI, PostgreSQL",
        )
        session.add(model)
        await session.commit()
        await session.refresh(model)
        return model
