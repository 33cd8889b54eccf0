"""Role assignment entity - time-bounded link between a user and a role."""

from dataclasses import dataclass, replace
from datetime import datetime
from uuid import UUID

from portalauthz.domain.value_objects import AssignmentReason, AssignmentStatus


@dataclass
class RoleAssignment:
    """Assignment of a role to a user, optionally expiring and scoped.

    ``deactivated_at`` records when the assignment stopped being active so
    historical resolutions still see it before that instant. Rows written
    before it was tracked carry ``None`` and count as deactivated at any time.
    """

    id: UUID
    user_id: str
    role_id: UUID
    assigned_by: str
    assigned_at: datetime
    expires_at: datetime | None = None
    scope: dict[str, str] | None = None
    is_active: bool = True
    reason: AssignmentReason = AssignmentReason.MANUAL
    notes: str | None = None
    deactivated_at: datetime | None = None

    def is_expired_at(self, at: datetime) -> bool:
        return self.expires_at is not None and at >= self.expires_at

    def is_deactivated_at(self, at: datetime) -> bool:
        if self.is_active:
            return False
        return self.deactivated_at is None or at >= self.deactivated_at

    def status_at(self, at: datetime) -> AssignmentStatus:
        """Derived state; expiry is computed, deactivation is stored."""
        if self.is_deactivated_at(at):
            return AssignmentStatus.DEACTIVATED
        if self.is_expired_at(at):
            return AssignmentStatus.EXPIRED
        return AssignmentStatus.ACTIVE

    def is_in_effect_at(self, at: datetime, role_active: bool) -> bool:
        if not role_active or at < self.assigned_at:
            return False
        return self.status_at(at) is AssignmentStatus.ACTIVE

    def deactivate(self, at: datetime) -> "RoleAssignment":
        return replace(self, is_active=False, deactivated_at=at)
