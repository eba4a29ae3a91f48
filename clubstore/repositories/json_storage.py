"""
JSON-file persistence adapter.

Every key lives in one JSON document (like the old `data.json`), next to a
`_revisions` map. File I/O is blocking, so each operation runs in a worker
thread. A per-document lock makes each load-check-save atomic, so
concurrent writes to different keys never drop one another.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import threading
from pathlib import Path
from typing import Any, Optional

from clubstore.core.errors import SerializationError, StorageUnavailable

from .keyed_store import KeyedStore, check_revision, encode_value

logger = logging.getLogger(__name__)

REVISIONS_KEY = "_revisions"

# one lock per document, shared by every store opened on the same path
_DOCUMENT_LOCKS: dict[Path, threading.Lock] = {}
_REGISTRY_LOCK = threading.Lock()


def document_lock(path: Path) -> threading.Lock:
    key = path.resolve()
    with _REGISTRY_LOCK:
        return _DOCUMENT_LOCKS.setdefault(key, threading.Lock())


def db_defaults(db: dict) -> dict:
    db.setdefault(REVISIONS_KEY, {})
    return db


class JsonFileStore(KeyedStore):
    def __init__(self, path: str | os.PathLike[str]):
        self.path = Path(path)
        self._lock = document_lock(self.path)

    # -------------------------------------- file access --------------------------------------
    def _load(self) -> dict:
        try:
            if not self.path.exists():
                return db_defaults({})
            with self.path.open("r", encoding="utf-8") as f:
                text = f.read()
        except OSError as exc:
            raise StorageUnavailable(f"Cannot read {self.path}: {exc}") from exc
        if not text.strip():
            return db_defaults({})
        try:
            db = json.loads(text)
        except ValueError as exc:
            raise SerializationError(f"{self.path} is not valid JSON") from exc
        if not isinstance(db, dict):
            raise SerializationError(f"{self.path} must hold a JSON object")
        return db_defaults(db)

    def _save(self, db: dict) -> None:
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(db, ensure_ascii=False, indent=2), encoding="utf-8")
            os.replace(tmp, self.path)
        except OSError as exc:
            raise StorageUnavailable(f"Cannot write {self.path}: {exc}") from exc

    def _read_sync(self, key: str) -> tuple[Any | None, int]:
        with self._lock:
            db = self._load()
        return db.get(key), int(db[REVISIONS_KEY].get(key, 0))

    def _write_sync(self, key: str, value: Any, expected_revision: Optional[int]) -> int:
        with self._lock:
            db = self._load()
            revisions = db[REVISIONS_KEY]
            check_revision(key, expected_revision, int(revisions.get(key, 0)))
            db[key] = value
            revisions[key] = int(revisions.get(key, 0)) + 1
            self._save(db)
            return revisions[key]

    def _remove_sync(self, key: str) -> None:
        with self._lock:
            db = self._load()
            if key not in db and key not in db[REVISIONS_KEY]:
                return
            db.pop(key, None)
            db[REVISIONS_KEY].pop(key, None)
            self._save(db)

    # -------------------------------------- KeyedStore --------------------------------------
    async def read_versioned(self, key: str) -> tuple[Any | None, int]:
        value, revision = await asyncio.to_thread(self._read_sync, key)
        logger.debug("read %s (revision %s)", key, revision)
        return value, revision

    async def write(self, key: str, value: Any, expected_revision: Optional[int] = None) -> int:
        # round-trip through JSON so the stored value never aliases caller objects
        normalized = json.loads(encode_value(key, value))
        revision = await asyncio.to_thread(self._write_sync, key, normalized, expected_revision)
        logger.debug("wrote %s (revision %s)", key, revision)
        return revision

    async def remove(self, key: str) -> None:
        await asyncio.to_thread(self._remove_sync, key)
        logger.debug("removed %s", key)
