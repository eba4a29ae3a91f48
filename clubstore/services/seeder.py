"""
Baseline sample data.

`Seeder.initialize()` runs on every app start. A collection that is missing
or empty gets its baseline records; a collection holding anything is left
alone, so user data is never clobbered and nothing is duplicated.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Callable, Optional

from clubstore.core.config import Settings, get_settings
from clubstore.core.utils import as_utc, utcnow
from clubstore.domain.models import Announcement, Event, Player, Team, User
from clubstore.repositories.keyed_store import (
    ANNOUNCEMENTS_KEY,
    EVENTS_KEY,
    PLAYERS_KEY,
    TEAMS_KEY,
    USERS_KEY,
    KeyedStore,
)

logger = logging.getLogger(__name__)


def sample_teams() -> list[Team]:
    return [
        Team(id="team-1", name="Windhoek Wanderers", division="Premier League", category="Men"),
        Team(id="team-2", name="Coastal Strikers", division="Premier League", category="Women"),
        Team(id="team-3", name="Desert Hawks", division="First Division", category="Men"),
        Team(id="team-4", name="Capital Queens", division="First Division", category="Women"),
    ]


def sample_players() -> list[Player]:
    return [
        Player(
            id="player-1", first_name="Johannes", last_name="Shikongo", email="j.shikongo@example.com",
            phone="+264811000001", team_id="team-1", date_of_birth=date(1998, 3, 12),
            gender="Male", position="Forward",
        ),
        Player(
            id="player-2", first_name="Maria", last_name="Nghipondoka", email="m.nghipondoka@example.com",
            phone="+264811000002", team_id="team-2", date_of_birth=date(2001, 7, 4),
            gender="Female", position="Midfielder",
        ),
        Player(
            id="player-3", first_name="Petrus", last_name="van Wyk", email="p.vanwyk@example.com",
            phone="+264811000003", team_id="team-3", date_of_birth=date(1995, 11, 23),
            gender="Male", position="Goalkeeper",
        ),
        Player(
            id="player-4", first_name="Selma", last_name="Amutenya", email="s.amutenya@example.com",
            phone="+264811000004", team_id="team-4", date_of_birth=date(2003, 1, 30),
            gender="Female", position="Defender",
        ),
    ]


def sample_events(now: datetime) -> list[Event]:
    day = now.replace(hour=9, minute=0, second=0, microsecond=0)
    return [
        Event(
            id="event-1", title="National Indoor Championship", category="Tournament",
            date=day + timedelta(days=30), location="Windhoek Sports Complex",
            registration_deadline=day + timedelta(days=14),
        ),
        Event(
            id="event-2", title="Junior Development Camp", category="Training",
            date=day + timedelta(days=10), location="Swakopmund Hockey Field",
            registration_deadline=day + timedelta(days=5),
        ),
        Event(
            id="event-3", title="Umpiring Workshop", category="Workshop",
            date=day - timedelta(days=3), location="Association Office",
            registration_deadline=day - timedelta(days=10),
        ),
    ]


def sample_announcements(today: date) -> list[Announcement]:
    return [
        Announcement(
            id="announcement-1", title="Season Registration Open", date=today,
            message="Team and player registration for the new season is now open.", important=True,
        ),
        Announcement(
            id="announcement-2", title="New Training Schedule", date=today - timedelta(days=2),
            message="Updated training times are posted for all divisions.",
        ),
        Announcement(
            id="announcement-3", title="Coaching Clinic", date=today - timedelta(days=7),
            message="Coaches are invited to the level one clinic next month.",
        ),
    ]


def sample_users(settings: Settings, now: datetime) -> list[User]:
    return [
        User(
            id="user-admin",
            username=settings.admin_username,
            email=settings.admin_email,
            password=settings.admin_password,
            created_at=now,
        )
    ]


class Seeder:
    def __init__(self, store: KeyedStore, settings: Optional[Settings] = None, clock: Callable[[], datetime] = utcnow):
        self.store = store
        self.settings = settings or get_settings()
        self.clock = clock

    def baseline(self) -> dict[str, list]:
        now = as_utc(self.clock())
        return {
            TEAMS_KEY: sample_teams(),
            PLAYERS_KEY: sample_players(),
            EVENTS_KEY: sample_events(now),
            ANNOUNCEMENTS_KEY: sample_announcements(now.date()),
            USERS_KEY: sample_users(self.settings, now),
        }

    async def initialize(self) -> list[str]:
        """Seed every empty collection; returns the keys that were written."""
        seeded = []
        for key, records in self.baseline().items():
            existing = await self.store.read(key)
            if existing:
                continue
            await self.store.write(key, [record.to_record() for record in records])
            logger.info("Seeded %s with %d record(s)", key, len(records))
            seeded.append(key)
        return seeded
