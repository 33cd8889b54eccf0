"""Permission entity - catalog entry for an atomic capability."""

from dataclasses import dataclass
from datetime import datetime

from portalauthz.domain.value_objects import PermissionCategory


@dataclass
class Permission:
    """Permission - named capability such as ``grades:edit``, tagged with a category."""

    id: str
    name: str
    description: str
    category: PermissionCategory
    created_at: datetime
    updated_at: datetime
