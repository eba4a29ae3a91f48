"""Domain records and pure helpers (no storage access)."""

from .models import Announcement, Event, Player, Session, Team, User

__all__ = ["Announcement", "Event", "Player", "Session", "Team", "User"]
