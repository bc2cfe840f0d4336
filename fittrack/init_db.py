from __future__ import annotations

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine

from fittrack.db import engine as default_engine
from fittrack.models import Base


async def init_db(engine: AsyncEngine | None = None) -> None:
    eng = engine or default_engine
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        if eng.dialect.name == "sqlite":
            # WAL lets readers proceed during a write
            await conn.execute(text("PRAGMA journal_mode=WAL;"))
            await conn.execute(text("PRAGMA synchronous=NORMAL;"))
