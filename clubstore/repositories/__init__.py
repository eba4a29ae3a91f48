"""
Persistence adapters.

`KeyedStore` implementations encapsulate how collections are stored (a JSON
file or a SQL table); entity repositories depend only on that contract.
"""

from .entity_repository import (
    AnnouncementRepository,
    EntityRepository,
    EventRepository,
    PlayerRepository,
    TeamRepository,
    UserRepository,
)
from .json_storage import JsonFileStore
from .keyed_store import COLLECTION_KEYS, SESSION_KEY, KeyedStore
from .sql_storage import SQLKeyedStore

__all__ = [
    "AnnouncementRepository",
    "COLLECTION_KEYS",
    "EntityRepository",
    "EventRepository",
    "JsonFileStore",
    "KeyedStore",
    "PlayerRepository",
    "SESSION_KEY",
    "SQLKeyedStore",
    "TeamRepository",
    "UserRepository",
]
