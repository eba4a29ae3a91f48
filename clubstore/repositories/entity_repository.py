"""
Typed CRUD over one collection each.

Every operation reads the whole collection, changes it in memory and writes
it back. Two overlapping updates are a lost-update race: the later write
wins. With `optimistic=True` the write carries the revision that was read
and a stale write raises StaleWriteError instead.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Generic, Mapping, Optional, Type, TypeVar

from clubstore.core.errors import NotFound, SerializationError
from clubstore.core.utils import new_id
from clubstore.domain.derived import (
    PlayerSummary,
    RegistrationWindow,
    filter_summaries,
    registration_window,
    resolve_team_name,
    roster_fill,
    summarize_player,
)
from clubstore.domain.models import Announcement, Event, Player, Record, Team, User

from .keyed_store import (
    ANNOUNCEMENTS_KEY,
    EVENTS_KEY,
    PLAYERS_KEY,
    TEAMS_KEY,
    USERS_KEY,
    KeyedStore,
)

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Record)


class EntityRepository(Generic[E]):
    entity_type: Type[E]
    key: str

    def __init__(self, store: KeyedStore, *, optimistic: bool = False):
        self.store = store
        self.optimistic = optimistic

    # -------------------------------------- helpers --------------------------------------
    async def _load(self) -> tuple[list[E], int]:
        raw, revision = await self.store.read_versioned(self.key)
        if raw is None:
            return [], revision
        if not isinstance(raw, list):
            raise SerializationError(f"Collection {self.key!r} must be a list, got {type(raw).__name__}")
        return [self.entity_type.from_record(item) for item in raw], revision

    async def _persist(self, items: list[E], revision: int) -> None:
        expected = revision if self.optimistic else None
        await self.store.write(self.key, [item.to_record() for item in items], expected_revision=expected)

    def _index_of(self, items: list[E], entity_id: str) -> int:
        for index, item in enumerate(items):
            if getattr(item, "id") == entity_id:
                return index
        return -1

    # -------------------------------------- CRUD --------------------------------------
    async def list(self) -> list[E]:
        items, _ = await self._load()
        return items

    async def get_by_id(self, entity_id: str) -> E:
        items, _ = await self._load()
        index = self._index_of(items, entity_id)
        if index < 0:
            raise NotFound(self.entity_type.KIND, entity_id)
        return items[index]

    async def save(self, draft: Mapping[str, Any]) -> E:
        entity = self.entity_type.from_draft(new_id(), draft)
        items, revision = await self._load()
        items.append(entity)
        await self._persist(items, revision)
        logger.debug("saved %s %s", self.entity_type.KIND, getattr(entity, "id"))
        return entity

    async def update(self, entity_id: str, changes: Mapping[str, Any]) -> E:
        items, revision = await self._load()
        index = self._index_of(items, entity_id)
        if index < 0:
            raise NotFound(self.entity_type.KIND, entity_id)
        updated = items[index].merged(changes)
        items[index] = updated
        await self._persist(items, revision)
        logger.debug("updated %s %s (%s)", self.entity_type.KIND, entity_id, ", ".join(sorted(changes)))
        return updated

    async def delete(self, entity_id: str) -> None:
        items, revision = await self._load()
        remaining = [item for item in items if getattr(item, "id") != entity_id]
        if len(remaining) == len(items):
            return
        await self._persist(remaining, revision)
        logger.debug("deleted %s %s", self.entity_type.KIND, entity_id)


class TeamRepository(EntityRepository[Team]):
    entity_type = Team
    key = TEAMS_KEY

    async def name_map(self) -> dict[str, str]:
        return {team.id: team.name for team in await self.list()}


class PlayerRepository(EntityRepository[Player]):
    """Players keep a weak `team_id`; deleting a team leaves it dangling."""

    entity_type = Player
    key = PLAYERS_KEY

    def __init__(self, store: KeyedStore, teams: TeamRepository, *, optimistic: bool = False, max_team_size: int = 16):
        super().__init__(store, optimistic=optimistic)
        self.teams = teams
        self.max_team_size = max_team_size

    async def team_name_for(self, player: Player) -> str:
        return resolve_team_name(player.team_id, await self.teams.name_map())

    async def list_by_team(self, team_id: str) -> list[Player]:
        return [p for p in await self.list() if p.team_id == team_id]

    async def count_by_team(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for player in await self.list():
            if player.team_id:
                counts[player.team_id] = counts.get(player.team_id, 0) + 1
        return counts

    async def roster_fill(self, team_id: str) -> float:
        counts = await self.count_by_team()
        return roster_fill(counts.get(team_id, 0), self.max_team_size)

    async def list_summaries(self, today: Optional[date] = None) -> list[PlayerSummary]:
        team_names = await self.teams.name_map()
        return [summarize_player(p, team_names, today) for p in await self.list()]

    async def search(self, query: str, today: Optional[date] = None) -> list[PlayerSummary]:
        return filter_summaries(await self.list_summaries(today), query)


class EventRepository(EntityRepository[Event]):
    entity_type = Event
    key = EVENTS_KEY

    @staticmethod
    def registration_status(event: Event, now: Optional[datetime] = None) -> RegistrationWindow:
        return registration_window(event.registration_deadline, now)

    async def list_open(self, now: Optional[datetime] = None) -> list[Event]:
        return [e for e in await self.list() if self.registration_status(e, now).open]


class AnnouncementRepository(EntityRepository[Announcement]):
    entity_type = Announcement
    key = ANNOUNCEMENTS_KEY

    def __init__(self, store: KeyedStore, *, optimistic: bool = False, recent_limit: int = 3):
        super().__init__(store, optimistic=optimistic)
        self.recent_limit = recent_limit

    async def list(self) -> list[Announcement]:
        """Newest first; announcements sharing a date keep their stored order."""
        items = await super().list()
        return sorted(items, key=lambda a: a.date, reverse=True)

    async def recent(self, limit: Optional[int] = None) -> list[Announcement]:
        limit = self.recent_limit if limit is None else limit
        return (await self.list())[: max(0, limit)]


class UserRepository(EntityRepository[User]):
    """Users collection; the rules around it live in AuthService."""

    entity_type = User
    key = USERS_KEY

    async def find_by_username(self, username: str) -> Optional[User]:
        for user in await self.list():
            if user.username == username:
                return user
        return None

    async def find_by_email(self, email: str) -> Optional[User]:
        needle = (email or "").strip().lower()
        for user in await self.list():
            if user.email.strip().lower() == needle:
                return user
        return None
