"""Schema creation for the SQL keyed store."""
from __future__ import annotations

import asyncio

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from clubstore.core.config import get_settings

from .session import Base, build_engine
from . import models  # noqa: F401  # ensure models are imported for metadata


async def create_all(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def _main() -> None:
    engine = build_engine(get_settings().database_url)
    try:
        await create_all(engine)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    try:
        asyncio.run(_main())
        print("Database tables created successfully.")
    except SQLAlchemyError as exc:
        raise SystemExit(f"Failed to create tables: {exc}") from exc
