"""Role assignment DTOs."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass
class AssignmentRequest:
    """One user's share of a bulk assignment."""

    user_id: str
    role_ids: list[UUID]
    expires_at: datetime | None = None
    scope: dict[str, str] | None = None
    notes: str | None = None


@dataclass
class AssignmentPatch:
    """Partial assignment update.

    ``None`` leaves a field unchanged; ``clear_expiry`` / ``clear_scope``
    remove the value instead.
    """

    expires_at: datetime | None = None
    scope: dict[str, str] | None = None
    is_active: bool | None = None
    clear_expiry: bool = False
    clear_scope: bool = False
