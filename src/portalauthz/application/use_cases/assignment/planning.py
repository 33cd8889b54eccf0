"""Validation and staging of new role assignments.

Every request in a batch is validated before anything is written, so a
failure on any role leaves the ledger untouched.
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from uuid import UUID, uuid4

from portalauthz.application.dto.assignment_dto import AssignmentRequest
from portalauthz.application.ports import UnitOfWork
from portalauthz.application.use_cases.audit.record_audit import audit_entry, snapshot
from portalauthz.application.use_cases.validation import ensure_utc
from portalauthz.domain.entities import AuditEntry, Role, RoleAssignment
from portalauthz.domain.exceptions import (
    InvalidExpiry,
    RoleInactive,
    RoleNotFound,
    ValidationError,
)
from portalauthz.domain.value_objects import AssignmentReason, AuditAction, normalize_scope

logger = logging.getLogger(__name__)


@dataclass
class AssignmentPlan:
    """Writes staged for one atomic assignment batch."""

    created: list[RoleAssignment] = field(default_factory=list)
    superseded: list[RoleAssignment] = field(default_factory=list)
    audit: list[AuditEntry] = field(default_factory=list)

    @property
    def user_ids(self) -> set[str]:
        return {a.user_id for a in self.created}

    async def apply(self, uow: UnitOfWork) -> None:
        for assignment in self.superseded:
            await uow.assignments.update(assignment)
        if self.created:
            await uow.assignments.create_batch(self.created)
        if self.audit:
            await uow.audit.append(self.audit)


async def _load_roles(uow: UnitOfWork, role_ids: list[UUID]) -> dict[UUID, Role]:
    roles = {r.id: r for r in await uow.roles.get_many(role_ids)}
    for role_id in role_ids:
        role = roles.get(role_id)
        if role is None:
            raise RoleNotFound(role_id)
        if not role.is_active:
            raise RoleInactive(role.name)
    return roles


async def plan_assignments(
    uow: UnitOfWork,
    requests: list[AssignmentRequest],
    assigned_by: str,
    *,
    now: datetime,
    transaction_id: UUID,
    reason: AssignmentReason = AssignmentReason.MANUAL,
) -> AssignmentPlan:
    """Validate all requests and stage one assignment per (user, role).

    An assignment already in effect for the same user and role is superseded
    (deactivated) so at most one stays in effect.
    """
    if not requests:
        raise ValidationError({"assignments": "At least one assignment is required"})

    plan = AssignmentPlan()
    staged: list[tuple[AssignmentRequest, list[UUID], datetime | None]] = []
    seen: set[tuple[str, UUID]] = set()
    for request in requests:
        user_id = (request.user_id or "").strip()
        if not user_id:
            raise ValidationError({"user_id": "User id is required"})
        role_ids = list(dict.fromkeys(request.role_ids))
        if not role_ids:
            raise ValidationError({"role_ids": "At least one role is required"})
        expires_at = ensure_utc(request.expires_at) if request.expires_at else None
        if expires_at is not None and expires_at <= now:
            raise InvalidExpiry(f"Expiry {expires_at.isoformat()} is not in the future")
        for role_id in role_ids:
            if (user_id, role_id) in seen:
                raise ValidationError(
                    {"assignments": f"Role {role_id} is assigned to {user_id} twice"}
                )
            seen.add((user_id, role_id))
        staged.append((replace(request, user_id=user_id), role_ids, expires_at))

    all_role_ids = list(dict.fromkeys(r for _, ids, _ in staged for r in ids))
    roles = await _load_roles(uow, all_role_ids)

    for request, role_ids, expires_at in staged:
        existing = await uow.assignments.list_by_user(request.user_id, include_inactive=False)
        for role_id in role_ids:
            for current in existing:
                if current.role_id == role_id and current.is_in_effect_at(now, True):
                    superseded = current.deactivate(now)
                    plan.superseded.append(superseded)
                    plan.audit.append(
                        audit_entry(
                            assigned_by,
                            AuditAction.ROLE_REMOVED,
                            "role_assignment",
                            current.id,
                            transaction_id=transaction_id,
                            before=snapshot(current),
                            after=snapshot(superseded),
                            subject=current.user_id,
                            timestamp=now,
                        )
                    )
                    logger.info(
                        "Assignment %s superseded for user %s role %r",
                        current.id,
                        current.user_id,
                        roles[role_id].name,
                    )

            assignment = RoleAssignment(
                id=uuid4(),
                user_id=request.user_id,
                role_id=role_id,
                assigned_by=assigned_by,
                assigned_at=now,
                expires_at=expires_at,
                scope=normalize_scope(request.scope),
                is_active=True,
                reason=reason,
                notes=request.notes,
            )
            plan.created.append(assignment)
            plan.audit.append(
                audit_entry(
                    assigned_by,
                    AuditAction.ROLE_ASSIGNED,
                    "role_assignment",
                    assignment.id,
                    transaction_id=transaction_id,
                    after={**snapshot(assignment), "role_name": roles[role_id].name},
                    subject=assignment.user_id,
                    timestamp=now,
                )
            )
    return plan
