"""
KeyedStore contract.

A keyed store maps a fixed string key to one JSON value: a list of records
for collections, a single mapping for the session pointer. Writes always
replace the whole value; callers do their own read-modify-write.

Each key carries a revision counter (0 when never written, +1 per write,
back to 0 on remove). Passing `expected_revision` to `write` turns it into a
compare-and-set that fails with StaleWriteError instead of overwriting.
"""

from __future__ import annotations

import abc
import json
import logging
from typing import Any, Optional

from clubstore.core.errors import SerializationError, StaleWriteError

logger = logging.getLogger(__name__)

TEAMS_KEY = "teams"
PLAYERS_KEY = "players"
EVENTS_KEY = "events"
ANNOUNCEMENTS_KEY = "announcements"
USERS_KEY = "users"
SESSION_KEY = "session"

COLLECTION_KEYS = (TEAMS_KEY, PLAYERS_KEY, EVENTS_KEY, ANNOUNCEMENTS_KEY, USERS_KEY)


def encode_value(key: str, value: Any) -> str:
    if not isinstance(value, (list, tuple, dict)):
        raise SerializationError(f"Value for {key!r} must be a list of records or a record, got {type(value).__name__}")
    try:
        return json.dumps(value, ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise SerializationError(f"Cannot encode value for {key!r}: {exc}") from exc


def decode_value(key: str, raw: str) -> Any:
    try:
        return json.loads(raw)
    except ValueError as exc:
        raise SerializationError(f"Stored value for {key!r} is not valid JSON") from exc


def check_revision(key: str, expected: Optional[int], actual: int) -> None:
    if expected is not None and expected != actual:
        logger.warning("Stale write rejected for %s (expected %s, stored %s)", key, expected, actual)
        raise StaleWriteError(key, expected, actual)


class KeyedStore(abc.ABC):
    """Async get/set/remove of whole values under string keys."""

    async def read(self, key: str) -> Any | None:
        """Stored value, or None when the key was never written."""
        value, _ = await self.read_versioned(key)
        return value

    @abc.abstractmethod
    async def read_versioned(self, key: str) -> tuple[Any | None, int]:
        ...

    @abc.abstractmethod
    async def write(self, key: str, value: Any, expected_revision: Optional[int] = None) -> int:
        """Replace the value under `key`; returns the new revision."""

    @abc.abstractmethod
    async def remove(self, key: str) -> None:
        """Idempotent; removing an absent key is not an error."""

    async def close(self) -> None:
        return None
