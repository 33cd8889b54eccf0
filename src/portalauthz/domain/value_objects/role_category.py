"""Role categories."""

from enum import StrEnum


class RoleCategory(StrEnum):
    """Organisational family a role belongs to."""

    ADMINISTRATIVE = "administrative"
    ACADEMIC = "academic"
    FINANCIAL = "financial"
    SUPPORT = "support"
    SYSTEM = "system"
