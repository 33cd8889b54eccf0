"""Role entity for RBAC."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from portalauthz.domain.value_objects import RoleCategory


@dataclass
class Role:
    """Role - named bundle of permission ids with an authority level.

    ``permission_ids`` keeps insertion order and holds each id once.
    """

    id: UUID
    name: str
    description: str
    category: RoleCategory
    level: int
    created_at: datetime
    updated_at: datetime
    permission_ids: list[str] = field(default_factory=list)
    is_active: bool = True
    is_system_role: bool = False
    version: int = 1
    created_by: str | None = None

    def __post_init__(self) -> None:
        self.permission_ids = list(dict.fromkeys(self.permission_ids))
