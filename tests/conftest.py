import os

# Must be set before the app (and its Settings) is imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-jwt-secret")
os.environ.setdefault("ADMIN_EMAIL", "admin@example.com")
os.environ.setdefault("ADMIN_PASSWORD", "admin-password")
os.environ.setdefault("WEBHOOK_SECRET", "test-webhook-secret")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("LOG_FORMAT", "console")

from typing import AsyncGenerator, Dict
from uuid import UUID

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.auth.security import create_access_token, hash_password
from app.core.models import Ambassador
from app.core.settings_store import SettingsStore
from app.db.session import Base, get_db
from app.main import app


TEST_DATABASE_URL = "sqlite+aiosqlite://"
WEBHOOK_SECRET = os.environ["WEBHOOK_SECRET"]
AMBASSADOR_PASSWORD = "ambassador-pass"


@pytest.fixture()
async def session_factory() -> AsyncGenerator[async_sessionmaker, None]:
    """Fresh in-memory database per test; StaticPool keeps every session on the same connection."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture()
async def db_session(session_factory: async_sessionmaker) -> AsyncGenerator[AsyncSession, None]:
    """Session for arranging and asserting; requests get their own session like in production."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    async with session_factory() as session:
        await SettingsStore(session).seed_defaults()
        await session.commit()
        yield session

    app.dependency_overrides.clear()


@pytest.fixture()
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to the FastAPI app."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture()
def make_ambassador(db_session: AsyncSession):
    counter = {"n": 0}

    async def _make(**overrides) -> Ambassador:
        counter["n"] += 1
        n = counter["n"]
        values = dict(
            name=f"Ambassador {n}",
            email=f"ambassador{n}@example.com",
            phone=f"+23770000{n:04d}",
            password_hash=hash_password(AMBASSADOR_PASSWORD),
            referral_code=f"AMB-TEST2024{n:03d}",
            status="active",
        )
        values.update(overrides)
        ambassador = Ambassador(**values)
        db_session.add(ambassador)
        await db_session.commit()
        await db_session.refresh(ambassador)
        return ambassador

    return _make


@pytest.fixture()
def reload(db_session: AsyncSession):
    """Re-read a row from the database, bypassing the identity map."""

    async def _reload(model, pk):
        if isinstance(pk, str):
            pk = UUID(pk)
        stmt = select(model).where(model.id == pk).execution_options(populate_existing=True)
        return (await db_session.execute(stmt)).scalar_one_or_none()

    return _reload


@pytest.fixture()
def set_setting(db_session: AsyncSession):
    async def _set(key: str, value: str) -> None:
        await SettingsStore(db_session).set(key, value)
        await db_session.commit()

    return _set


@pytest.fixture()
def admin_headers() -> Dict[str, str]:
    token = create_access_token(user_id="admin", email="admin@example.com", role="admin")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def ambassador_headers():
    def _headers(ambassador: Ambassador) -> Dict[str, str]:
        token = create_access_token(user_id=str(ambassador.id), email=ambassador.email, role="ambassador")
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture()
def webhook_headers() -> Dict[str, str]:
    return {"X-Security-Code": WEBHOOK_SECRET}
