"""Error taxonomy surfaced by the store, repositories and auth service."""

from __future__ import annotations

from typing import Iterable, Optional


class ClubStoreError(Exception):
    """Base class for every error raised by clubstore."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class StorageUnavailable(ClubStoreError):
    pass


class SerializationError(ClubStoreError):
    pass


class ValidationError(ClubStoreError):
    def __init__(self, message: str, fields: Iterable[str] = ()):
        super().__init__(message)
        self.fields = tuple(fields)


class NotFound(ClubStoreError):
    def __init__(self, kind: str, entity_id: str):
        super().__init__(f"{kind} {entity_id!r} not found")
        self.kind = kind
        self.entity_id = entity_id


class ConflictError(ClubStoreError):
    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class StaleWriteError(ConflictError):
    """A write carried a revision older than the stored one."""

    def __init__(self, key: str, expected: int, actual: int):
        super().__init__(f"Stale write on {key!r}: expected revision {expected}, found {actual}")
        self.key = key
        self.expected = expected
        self.actual = actual


class InvalidCredentials(ClubStoreError):
    def __init__(self, message: str = "Invalid username or password"):
        super().__init__(message)
