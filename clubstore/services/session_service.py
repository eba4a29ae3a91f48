"""Session pointer helpers (start, load, clear)."""
from __future__ import annotations

from typing import Optional

from clubstore.core.errors import SerializationError
from clubstore.domain.models import Session
from clubstore.repositories.keyed_store import SESSION_KEY, KeyedStore


async def load_session(store: KeyedStore) -> Optional[Session]:
    raw = await store.read(SESSION_KEY)
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise SerializationError(f"{SESSION_KEY!r} must hold a single record")
    return Session.from_record(raw)


async def issue_session(store: KeyedStore, user_id: str) -> Session:
    """Replace whatever session exists; only one user is logged in at a time."""
    session = Session(user_id=user_id)
    await store.write(SESSION_KEY, session.to_record())
    return session


async def clear_session(store: KeyedStore) -> None:
    await store.remove(SESSION_KEY)
