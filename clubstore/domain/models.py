"""
Typed records stored by clubstore.

Each entity is a dataclass whose attributes use snake_case; the stored
record uses the camelCase keys the mobile client writes (`firstName`,
`teamId`, `registrationDeadline`...). Dates travel as ISO-8601 strings:
`YYYY-MM-DD` for calendar dates, full datetimes for event times.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace, MISSING
from datetime import date, datetime, time, timezone
from typing import Any, ClassVar, Mapping, Optional, Type, TypeVar

from clubstore.core.errors import SerializationError, ValidationError
from clubstore.core.utils import as_utc, format_datetime, parse_date, parse_datetime, utcnow

E = TypeVar("E", bound="Record")

TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off"}


def camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def parse_flag(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        text = value.strip().lower()
        if text in TRUE_VALUES:
            return True
        if text in FALSE_VALUES:
            return False
    raise ValidationError(f"{name} must be true or false", [name])


class Record:
    """Mixin with the record codec shared by every entity."""

    KIND: ClassVar[str] = "Record"
    REQUIRED: ClassVar[tuple[str, ...]] = ()
    NULLABLE: ClassVar[tuple[str, ...]] = ()
    DATE_FIELDS: ClassVar[tuple[str, ...]] = ()
    DATETIME_FIELDS: ClassVar[tuple[str, ...]] = ()
    BOOL_FIELDS: ClassVar[tuple[str, ...]] = ()

    # -------------------------------------- codec --------------------------------------
    def to_record(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for f in fields(self):  # type: ignore[arg-type]
            value = getattr(self, f.name)
            if isinstance(value, datetime):
                value = format_datetime(value)
            elif isinstance(value, date):
                value = value.isoformat()
            out[camel_case(f.name)] = value
        return out

    @classmethod
    def from_record(cls: Type[E], record: Mapping[str, Any]) -> E:
        if not isinstance(record, Mapping):
            raise SerializationError(f"{cls.KIND} record must be a mapping, got {type(record).__name__}")
        values: dict[str, Any] = {}
        for f in fields(cls):  # type: ignore[arg-type]
            key = camel_case(f.name)
            if key not in record:
                if f.default is MISSING and f.default_factory is MISSING:  # type: ignore[misc]
                    raise SerializationError(f"{cls.KIND} record is missing {key!r}")
                continue
            raw = record[key]
            try:
                if raw is not None and f.name in cls.DATE_FIELDS:
                    raw = parse_date(raw)
                elif raw is not None and f.name in cls.DATETIME_FIELDS:
                    raw = as_utc(parse_datetime(raw))
            except (AttributeError, TypeError, ValueError) as exc:
                raise SerializationError(f"{cls.KIND} record has a malformed {key!r}: {raw!r}") from exc
            values[f.name] = raw
        return cls(**values)

    # -------------------------------------- drafts --------------------------------------
    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))  # type: ignore[arg-type]

    @classmethod
    def coerce(cls, name: str, value: Any) -> Any:
        """Convert caller input for one field, raising ValidationError on bad shapes."""
        if value is None:
            return None
        try:
            if name in cls.DATE_FIELDS:
                if isinstance(value, datetime):
                    return value.date()
                if isinstance(value, date):
                    return value
                return parse_date(str(value))
            if name in cls.DATETIME_FIELDS:
                if isinstance(value, datetime):
                    return as_utc(value)
                if isinstance(value, date):
                    return datetime.combine(value, time.min, tzinfo=timezone.utc)
                # naive strings are UTC, like every other datetime in the store
                return as_utc(parse_datetime(str(value)))
        except ValueError as exc:
            raise ValidationError(f"Invalid date for {name}", [name]) from exc
        if name in cls.BOOL_FIELDS:
            return parse_flag(name, value)
        if not isinstance(value, str):
            raise ValidationError(f"{name} must be text", [name])
        return value

    @classmethod
    def blank_fields(cls, values: Mapping[str, Any], names: tuple[str, ...]) -> list[str]:
        missing = []
        for name in names:
            value = values.get(name)
            if value is None or (isinstance(value, str) and not value.strip()):
                missing.append(name)
        return missing

    @classmethod
    def check_keys(cls, draft: Mapping[str, Any]) -> None:
        unknown = sorted(set(draft) - set(cls.field_names()))
        if unknown:
            raise ValidationError(f"Unknown {cls.KIND} field(s): {', '.join(unknown)}", unknown)

    @classmethod
    def from_draft(cls: Type[E], entity_id: str, draft: Mapping[str, Any]) -> E:
        """Build a new entity from caller data, enforcing the required-field set."""
        if "id" in draft:
            raise ValidationError("id is assigned by the store", ["id"])
        cls.check_keys(draft)
        values = {name: cls.coerce(name, value) for name, value in draft.items()}
        missing = cls.blank_fields(values, cls.REQUIRED)
        if missing:
            raise ValidationError(f"Missing required field(s): {', '.join(missing)}", missing)
        return cls(id=entity_id, **values)  # type: ignore[call-arg]

    def merged(self: E, changes: Mapping[str, Any]) -> E:
        """Shallow merge; caller-provided fields win. `id` is immutable."""
        if "id" in changes and changes["id"] != getattr(self, "id"):
            raise ValidationError("id is immutable", ["id"])
        changes = {k: v for k, v in changes.items() if k != "id"}
        self.check_keys(changes)
        values = {name: self.coerce(name, value) for name, value in changes.items()}
        required = tuple(n for n in self.REQUIRED if n in values and n not in self.NULLABLE)
        blank = self.blank_fields(values, required)
        if blank:
            raise ValidationError(f"Required field(s) cannot be blank: {', '.join(blank)}", blank)
        return replace(self, **values)  # type: ignore[type-var]


@dataclass
class Team(Record):
    KIND: ClassVar[str] = "Team"
    REQUIRED: ClassVar[tuple[str, ...]] = ("name", "division", "category")

    id: str
    name: str
    division: str
    category: str


@dataclass
class Player(Record):
    KIND: ClassVar[str] = "Player"
    REQUIRED: ClassVar[tuple[str, ...]] = ("first_name", "last_name", "team_id", "email", "phone")
    NULLABLE: ClassVar[tuple[str, ...]] = ("team_id",)
    DATE_FIELDS: ClassVar[tuple[str, ...]] = ("date_of_birth",)

    id: str
    first_name: str
    last_name: str
    email: str
    phone: str
    team_id: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: str = ""
    position: str = ""
    profile_image: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass
class Event(Record):
    KIND: ClassVar[str] = "Event"
    REQUIRED: ClassVar[tuple[str, ...]] = ("title", "category", "date", "location", "registration_deadline")
    DATETIME_FIELDS: ClassVar[tuple[str, ...]] = ("date", "registration_deadline")

    id: str
    title: str
    category: str
    date: datetime
    location: str
    registration_deadline: datetime


@dataclass
class Announcement(Record):
    KIND: ClassVar[str] = "Announcement"
    REQUIRED: ClassVar[tuple[str, ...]] = ("title", "date", "message")
    DATE_FIELDS: ClassVar[tuple[str, ...]] = ("date",)
    BOOL_FIELDS: ClassVar[tuple[str, ...]] = ("important",)

    id: str
    title: str
    date: date
    message: str
    important: bool = False


@dataclass
class User(Record):
    KIND: ClassVar[str] = "User"
    REQUIRED: ClassVar[tuple[str, ...]] = ("username", "email", "password")
    DATETIME_FIELDS: ClassVar[tuple[str, ...]] = ("created_at",)

    id: str
    username: str
    email: str
    password: str
    created_at: datetime = field(default_factory=utcnow)


@dataclass(frozen=True)
class Session(Record):
    """The single current-login pointer."""

    KIND: ClassVar[str] = "Session"
    DATETIME_FIELDS: ClassVar[tuple[str, ...]] = ("started_at",)

    user_id: str
    started_at: datetime = field(default_factory=utcnow)
