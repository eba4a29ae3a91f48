"""
Utility helpers shared across repositories/services.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
import uuid


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Normalize a datetime to aware UTC; naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_datetime(value: str) -> datetime:
    if not value:
        raise ValueError("expected datetime string")
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def parse_date(value: str) -> date:
    """Accept `YYYY-MM-DD` or a full ISO datetime and keep the date part."""
    if not value:
        raise ValueError("expected date string")
    if len(value) > 10:
        return parse_datetime(value).date()
    return date.fromisoformat(value)


def format_datetime(value: datetime) -> str:
    return as_utc(value).isoformat().replace("+00:00", "Z")
