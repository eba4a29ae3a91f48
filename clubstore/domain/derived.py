"""
Derived, non-persisted values computed from stored records.

Callers pass `today`/`now` explicitly when they need a fixed clock; the
defaults read the current time.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Mapping, Optional

from clubstore.core.utils import as_utc, utcnow

from .models import Player

UNKNOWN_TEAM = "Unknown Team"
SECONDS_PER_DAY = 24 * 60 * 60


@dataclass(frozen=True)
class RegistrationWindow:
    open: bool
    days_remaining: int


@dataclass(frozen=True)
class PlayerSummary:
    """Display row for player lists."""

    id: str
    name: str
    team: str
    position: str
    age: int
    team_id: Optional[str]


def calculate_age(date_of_birth: Optional[date], today: Optional[date] = None) -> int:
    """Whole years elapsed; the birthday must have been reached this year."""
    if date_of_birth is None:
        return 0
    today = today or date.today()
    age = today.year - date_of_birth.year
    if (today.month, today.day) < (date_of_birth.month, date_of_birth.day):
        age -= 1
    return age


def registration_window(deadline: datetime, now: Optional[datetime] = None) -> RegistrationWindow:
    current = as_utc(now or utcnow())
    deadline = as_utc(deadline)
    if current > deadline:
        return RegistrationWindow(open=False, days_remaining=0)
    delta = (deadline - current).total_seconds()
    return RegistrationWindow(open=True, days_remaining=math.ceil(delta / SECONDS_PER_DAY))


def resolve_team_name(team_id: Optional[str], team_names: Mapping[str, str]) -> str:
    if not team_id:
        return UNKNOWN_TEAM
    return team_names.get(team_id) or UNKNOWN_TEAM


def roster_fill(count: int, max_size: int) -> float:
    if max_size <= 0:
        return 1.0
    return min(count / max_size, 1.0)


def summarize_player(player: Player, team_names: Mapping[str, str], today: Optional[date] = None) -> PlayerSummary:
    return PlayerSummary(
        id=player.id,
        name=player.full_name,
        team=resolve_team_name(player.team_id, team_names),
        position=player.position or "",
        age=calculate_age(player.date_of_birth, today),
        team_id=player.team_id,
    )


def matches_query(summary: PlayerSummary, query: str) -> bool:
    needle = (query or "").strip().lower()
    if not needle:
        return True
    return any(needle in value.lower() for value in (summary.name, summary.team, summary.position))


def filter_summaries(summaries: Iterable[PlayerSummary], query: str) -> list[PlayerSummary]:
    return [s for s in summaries if matches_query(s, query)]
