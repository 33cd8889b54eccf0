"""Permission categories."""

from enum import StrEnum


class PermissionCategory(StrEnum):
    """Area of the portal a permission belongs to."""

    ACADEMIC = "academic"
    ADMINISTRATIVE = "administrative"
    FINANCIAL = "financial"
    SYSTEM = "system"
    COMMUNICATION = "communication"
    REPORTING = "reporting"
