"""
Create the tables and seed the default settings rows.

Safe to run repeatedly; existing rows are never overwritten:
  python -m app.db.init_db
"""
import asyncio

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

import app.core.models  # noqa: F401  (registers the tables on Base.metadata)
from app.core.settings_store import SettingsStore
from app.db.session import AsyncSessionLocal, Base, engine


async def create_tables(bind: AsyncEngine) -> None:
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def seed_settings(db: AsyncSession) -> int:
    added = await SettingsStore(db).seed_defaults()
    await db.commit()
    return added


async def main() -> None:
    await create_tables(engine)
    print("Tables ready.")
    async with AsyncSessionLocal() as db:
        added = await seed_settings(db)
    print(f"Seeded {added} default setting(s).")
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
