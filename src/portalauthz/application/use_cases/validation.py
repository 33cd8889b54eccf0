"""Input validation helpers shared by the use cases."""

from datetime import UTC, datetime
from enum import StrEnum
from typing import TypeVar

E = TypeVar("E", bound=StrEnum)


def parse_choice(
    enum_cls: type[E], value: object, field: str, errors: dict[str, str]
) -> E | None:
    """Parse ``value`` into ``enum_cls``; record a message in ``errors`` on failure."""
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(e.value for e in enum_cls)
        errors[field] = f"Unknown {field} {value!r}, expected one of: {allowed}"
        return None


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so they compare with stored timestamps."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def validate_level(
    level: object, min_level: int, max_level: int, errors: dict[str, str]
) -> int | None:
    if isinstance(level, bool) or not isinstance(level, int):
        errors["level"] = "Level must be an integer"
        return None
    if not min_level <= level <= max_level:
        errors["level"] = f"Level must be between {min_level} and {max_level}"
        return None
    return level
