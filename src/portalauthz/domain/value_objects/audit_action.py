"""Audit log action kinds."""

from enum import StrEnum


class AuditAction(StrEnum):
    """Mutations recorded in the audit log."""

    PERMISSION_CREATED = "permission_created"
    PERMISSION_UPDATED = "permission_updated"
    PERMISSION_DELETED = "permission_deleted"
    ROLE_CREATED = "role_created"
    ROLE_UPDATED = "role_updated"
    ROLE_DELETED = "role_deleted"
    ROLE_CLONED = "role_cloned"
    ROLE_ASSIGNED = "role_assigned"
    ROLE_ASSIGNMENT_UPDATED = "role_assignment_updated"
    ROLE_REMOVED = "role_removed"
    BULK_ASSIGNMENT = "bulk_assignment"
    ACCESS_DENIED = "access_denied"


class AssignmentReason(StrEnum):
    """Why an assignment was created."""

    MANUAL = "manual"
    BULK = "bulk"
    MIGRATION = "migration"
    APPROVAL = "approval"


class AssignmentStatus(StrEnum):
    """Lifecycle state of an assignment, derived at read time."""

    ACTIVE = "active"
    EXPIRED = "expired"
    DEACTIVATED = "deactivated"
