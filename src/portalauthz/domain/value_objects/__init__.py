"""Domain value objects."""

from portalauthz.domain.value_objects.audit_action import (
    AssignmentReason,
    AssignmentStatus,
    AuditAction,
)
from portalauthz.domain.value_objects.permission_category import PermissionCategory
from portalauthz.domain.value_objects.permission_id import (
    PermissionId,
    is_valid_permission_id,
    permission_grants,
)
from portalauthz.domain.value_objects.role_category import RoleCategory
from portalauthz.domain.value_objects.scope import Scope, normalize_scope, scope_matches

__all__ = [
    "AssignmentReason",
    "AssignmentStatus",
    "AuditAction",
    "PermissionCategory",
    "PermissionId",
    "RoleCategory",
    "Scope",
    "is_valid_permission_id",
    "normalize_scope",
    "permission_grants",
    "scope_matches",
]
