"""
Local persistence layer for the club-management client.

Teams, players, events, announcements and user accounts live in a keyed
store (JSON file or SQL table); repositories and services sit on top of it.
"""

from clubstore.app_factory import ClubStore

__all__ = ["ClubStore"]
