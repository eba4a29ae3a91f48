"""Keyed store backed by a single SQL table through SQLAlchemy's asyncio extension."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from clubstore.core.errors import StorageUnavailable
from clubstore.db.create_tables import create_all
from clubstore.db.models import KeyValueRow
from clubstore.db.session import build_engine, build_sessionmaker, get_session

from .keyed_store import KeyedStore, check_revision, decode_value, encode_value

logger = logging.getLogger(__name__)


class SQLKeyedStore(KeyedStore):
    """One row per key in `kv_store`; the value column holds JSON text."""

    def __init__(self, url: str | None = None, *, engine: AsyncEngine | None = None):
        if engine is None:
            engine = build_engine(url or "")
        self.engine = engine
        self._sessions = build_sessionmaker(engine)
        self._schema_ready = False
        # SQLite cannot upgrade two concurrent readers to writers
        self._write_lock = asyncio.Lock()
        self._schema_lock = asyncio.Lock()

    async def _ensure_schema(self) -> None:
        if self._schema_ready:
            return
        async with self._schema_lock:
            if not self._schema_ready:
                await create_all(self.engine)
                self._schema_ready = True

    async def read_versioned(self, key: str) -> tuple[Any | None, int]:
        try:
            await self._ensure_schema()
            async with get_session(self._sessions) as session:
                row = await session.get(KeyValueRow, key)
                if row is None:
                    return None, 0
                raw, revision = row.value, row.revision
        except SQLAlchemyError as exc:
            raise StorageUnavailable(f"Cannot read {key!r}: {exc}") from exc
        logger.debug("read %s (revision %s)", key, revision)
        return decode_value(key, raw), revision

    async def write(self, key: str, value: Any, expected_revision: Optional[int] = None) -> int:
        encoded = encode_value(key, value)
        async with self._write_lock:
            try:
                await self._ensure_schema()
                async with get_session(self._sessions) as session:
                    row = await session.get(KeyValueRow, key)
                    check_revision(key, expected_revision, row.revision if row else 0)
                    if row is None:
                        row = KeyValueRow(key=key, value=encoded, revision=1)
                        session.add(row)
                    else:
                        row.value = encoded
                        row.revision = row.revision + 1
                    revision = row.revision
                    await session.commit()
            except SQLAlchemyError as exc:
                raise StorageUnavailable(f"Cannot write {key!r}: {exc}") from exc
        logger.debug("wrote %s (revision %s)", key, revision)
        return revision

    async def remove(self, key: str) -> None:
        async with self._write_lock:
            try:
                await self._ensure_schema()
                async with get_session(self._sessions) as session:
                    await session.execute(delete(KeyValueRow).where(KeyValueRow.key == key))
                    await session.commit()
            except SQLAlchemyError as exc:
                raise StorageUnavailable(f"Cannot remove {key!r}: {exc}") from exc
        logger.debug("removed %s", key)

    async def close(self) -> None:
        await self.engine.dispose()
