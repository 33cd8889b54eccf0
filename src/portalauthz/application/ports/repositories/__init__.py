"""Repository ports."""

from portalauthz.application.ports.repositories.assignment_repository import (
    AssignmentRepository,
)
from portalauthz.application.ports.repositories.audit_repository import AuditRepository
from portalauthz.application.ports.repositories.permission_repository import (
    PermissionRepository,
)
from portalauthz.application.ports.repositories.role_repository import RoleRepository

__all__ = [
    "AssignmentRepository",
    "AuditRepository",
    "PermissionRepository",
    "RoleRepository",
]
