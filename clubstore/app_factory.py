"""
Composition root.

`ClubStore` is the single context object the UI layer receives: it owns the
keyed store, the repositories, the seeder and the auth service (and through
it the current Session).
"""

from __future__ import annotations

from typing import Optional

from clubstore.core.config import Settings, get_settings
from clubstore.core.log import configure_logging
from clubstore.repositories.entity_repository import (
    AnnouncementRepository,
    EventRepository,
    PlayerRepository,
    TeamRepository,
    UserRepository,
)
from clubstore.repositories.json_storage import JsonFileStore
from clubstore.repositories.keyed_store import KeyedStore
from clubstore.repositories.sql_storage import SQLKeyedStore
from clubstore.services.auth_service import AuthService
from clubstore.services.seeder import Seeder


def build_store(settings: Settings) -> KeyedStore:
    if settings.backend == "json":
        return JsonFileStore(settings.data_file)
    if settings.backend == "sql":
        return SQLKeyedStore(settings.database_url)
    raise RuntimeError(f"Unknown CLUBSTORE_BACKEND {settings.backend!r}; use 'json' or 'sql'.")


class ClubStore:
    def __init__(self, store: KeyedStore, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.store = store
        optimistic = self.settings.optimistic_writes
        self.teams = TeamRepository(store, optimistic=optimistic)
        self.players = PlayerRepository(
            store, self.teams, optimistic=optimistic, max_team_size=self.settings.max_team_size
        )
        self.events = EventRepository(store, optimistic=optimistic)
        self.announcements = AnnouncementRepository(
            store, optimistic=optimistic, recent_limit=self.settings.recent_announcements
        )
        self.users = UserRepository(store, optimistic=optimistic)
        self.auth = AuthService(store, self.users)
        self.seeder = Seeder(store, self.settings)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "ClubStore":
        settings = settings or get_settings()
        configure_logging(settings.log_level)
        return cls(build_store(settings), settings)

    async def start(self) -> None:
        """Seed (when enabled) before any repository read, then restore the session."""
        if self.settings.seed_on_start:
            await self.seeder.initialize()
        await self.auth.restore()

    async def close(self) -> None:
        await self.store.close()

    async def __aenter__(self) -> "ClubStore":
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
