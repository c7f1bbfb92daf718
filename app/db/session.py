from typing import AsyncGenerator, Dict

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from app.core.config import settings


def engine_options(database_url: str) -> Dict[str, object]:
    """Pool tuning for server databases; SQLite (local runs, tests) takes the defaults."""
    if database_url.startswith("sqlite"):
        return {}
    # pool_pre_ping: drop connections the server closed while idle.
    # pool_recycle: never reuse a connection older than five minutes.
    return {"pool_pre_ping": True, "pool_recycle": 300}


engine = create_async_engine(
    settings.database_url,
    echo=False,
    **engine_options(settings.database_url),
)

# expire_on_commit=False: response models are built from rows after commit
AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

Base = declarative_base()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """One session per request; services own commit and rollback."""
    async with AsyncSessionLocal() as session:
        yield session
