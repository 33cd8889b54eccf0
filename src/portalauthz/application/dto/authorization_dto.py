"""Authorization DTOs - resolved permission sets and check results."""

from dataclasses import dataclass, field
from datetime import datetime

from portalauthz.domain.entities import Role, RoleAssignment
from portalauthz.domain.value_objects import permission_grants, scope_matches


@dataclass(frozen=True)
class Grant:
    """A (role, assignment) pair contributing to a user's permissions."""

    role: Role
    assignment: RoleAssignment

    def grants(self, permission_id: str) -> bool:
        return any(permission_grants(p, permission_id) for p in self.role.permission_ids)

    def applies_to(self, context: dict[str, str] | None) -> bool:
        return scope_matches(self.assignment.scope, context)


@dataclass(frozen=True)
class EffectivePermissionSet:
    """Permissions in effect for a user at ``evaluated_at``. Derived, never stored.

    ``valid_until`` is the earliest expiry among the contributing assignments;
    the set must be recomputed from that instant on.
    """

    user_id: str
    evaluated_at: datetime
    permission_ids: frozenset[str] = frozenset()
    grants: tuple[Grant, ...] = ()
    valid_until: datetime | None = None

    def __contains__(self, permission_id: object) -> bool:
        return permission_id in self.permission_ids

    @property
    def role_names(self) -> list[str]:
        return sorted({g.role.name for g in self.grants})

    def is_fresh_at(self, at: datetime) -> bool:
        return at >= self.evaluated_at and (self.valid_until is None or at < self.valid_until)


@dataclass(frozen=True)
class CheckResult:
    """Answer of the permission gate."""

    granted: bool
    reason: str
    roles: list[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.granted


@dataclass(frozen=True)
class PermissionSummary:
    """Overview of a user's effective permissions, grouped by catalog category."""

    user_id: str
    evaluated_at: datetime
    role_names: list[str]
    highest_role_level: int
    is_admin: bool
    permissions_by_category: dict[str, list[str]]
    total_permissions: int
    valid_until: datetime | None = None

    @property
    def total_roles(self) -> int:
        return len(self.role_names)
