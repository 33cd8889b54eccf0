"""Effective permission resolution use case.

The permissions of a user at time ``T`` are the union of the permission ids of
every role reached through an assignment in effect at ``T``:

- the assignment was made at or before ``T``, had not been deactivated by
  ``T`` and either has no expiry or ``T < expires_at``;
- the referenced role exists and is active.

There are no deny permissions and no precedence, so overlapping roles simply
collapse by set union. Expiry and role deactivation are evaluated here, at
read time; nothing fires when an assignment expires. Role activity is
the current flag, so resolving in the past still honours a role deactivated
since.
"""

import logging
from datetime import UTC, datetime

from portalauthz.application.dto.authorization_dto import EffectivePermissionSet, Grant
from portalauthz.application.use_cases.validation import ensure_utc
from portalauthz.domain.entities import Role, RoleAssignment
from portalauthz.domain.exceptions import ResolutionUnavailable, StoreUnavailable

logger = logging.getLogger(__name__)


def _dedupe_key(assignment: RoleAssignment) -> tuple:
    return assignment.role_id, tuple(sorted((assignment.scope or {}).items()))


def build_permission_set(
    user_id: str,
    at: datetime,
    assignments: list[RoleAssignment],
    roles: dict,
) -> EffectivePermissionSet:
    """Pure part of the resolution: filter, dedupe and union."""
    latest: dict[tuple, RoleAssignment] = {}
    for assignment in assignments:
        if assignment.user_id != user_id:
            continue
        role: Role | None = roles.get(assignment.role_id)
        if role is None:
            logger.warning(
                "Assignment %s references missing role %s", assignment.id, assignment.role_id
            )
            continue
        if not assignment.is_in_effect_at(at, role.is_active):
            continue
        key = _dedupe_key(assignment)
        kept = latest.get(key)
        if kept is not None:
            logger.warning(
                "User %s has several assignments in effect for role %r; keeping the newest",
                user_id,
                role.name,
            )
            if kept.assigned_at >= assignment.assigned_at:
                continue
        latest[key] = assignment

    grants = sorted(
        (Grant(role=roles[a.role_id], assignment=a) for a in latest.values()),
        key=lambda g: (-g.role.level, g.role.name, str(g.assignment.id)),
    )
    permission_ids = frozenset(p for g in grants for p in g.role.permission_ids)
    expiries = [g.assignment.expires_at for g in grants if g.assignment.expires_at]
    return EffectivePermissionSet(
        user_id=user_id,
        evaluated_at=at,
        permission_ids=permission_ids,
        grants=tuple(grants),
        valid_until=min(expiries) if expiries else None,
    )


class ResolveEffectivePermissionsUseCase:
    """Compute the permissions in effect for a user at a given instant.

    Read-only. Assignments and roles are read in a single unit of work so a
    concurrent role deactivation is seen either fully or not at all.
    """

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, user_id: str, at: datetime | None = None) -> EffectivePermissionSet:
        """Resolve at ``at`` (default now). A user with no grants gets an empty set.

        Raises ResolutionUnavailable when the store cannot be read.
        """
        at = ensure_utc(at) if at else datetime.now(UTC)
        try:
            async with self._uow_factory() as uow:
                assignments = await uow.assignments.list_by_user(user_id, include_inactive=True)
                candidates = [a for a in assignments if a.is_in_effect_at(at, True)]
                role_ids = list(dict.fromkeys(a.role_id for a in candidates))
                roles = {r.id: r for r in await uow.roles.get_many(role_ids)} if role_ids else {}
        except (StoreUnavailable, TimeoutError, OSError) as e:
            logger.error("Permission resolution for user %s failed: %s", user_id, e)
            raise ResolutionUnavailable(f"Cannot resolve permissions for {user_id}") from e

        return build_permission_set(user_id, at, candidates, roles)
