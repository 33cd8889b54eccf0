"""Domain entities."""

from portalauthz.domain.entities.audit_entry import AuditEntry
from portalauthz.domain.entities.permission import Permission
from portalauthz.domain.entities.role import Role
from portalauthz.domain.entities.role_assignment import RoleAssignment

__all__ = [
    "AuditEntry",
    "Permission",
    "Role",
    "RoleAssignment",
]
