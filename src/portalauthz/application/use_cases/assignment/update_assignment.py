"""Update assignment use case."""

from dataclasses import replace
from datetime import UTC, datetime
from uuid import UUID

from portalauthz.application.dto.assignment_dto import AssignmentPatch
from portalauthz.application.ports import PermissionCache
from portalauthz.application.use_cases.audit.record_audit import audit_entry, snapshot
from portalauthz.application.use_cases.cache_invalidation import invalidate_users
from portalauthz.application.use_cases.validation import ensure_utc
from portalauthz.domain.entities import RoleAssignment
from portalauthz.domain.exceptions import InvalidExpiry, NotFound, ValidationError
from portalauthz.domain.value_objects import AuditAction, normalize_scope


class UpdateAssignmentUseCase:
    """Change expiry, scope or active flag of an assignment.

    Deactivation is terminal: a deactivated assignment cannot be reactivated,
    assign the role again instead.
    """

    def __init__(
        self,
        unit_of_work_factory: type,
        permission_cache: PermissionCache | None = None,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._cache = permission_cache

    async def execute(
        self, actor_id: str, assignment_id: UUID, patch: AssignmentPatch
    ) -> RoleAssignment:
        async with self._uow_factory() as uow:
            current = await uow.assignments.get_by_id(assignment_id, for_update=True)
            if not current:
                raise NotFound("RoleAssignment", assignment_id)

            if patch.is_active and not current.is_active:
                raise ValidationError(
                    {"is_active": "A deactivated assignment cannot be reactivated"}
                )

            expires_at = current.expires_at
            if patch.clear_expiry:
                expires_at = None
            elif patch.expires_at is not None:
                expires_at = ensure_utc(patch.expires_at)
                if expires_at <= current.assigned_at:
                    raise InvalidExpiry("Expiry must be after the assignment time")

            scope = current.scope
            if patch.clear_scope:
                scope = None
            elif patch.scope is not None:
                scope = normalize_scope(patch.scope)

            updated = replace(current, expires_at=expires_at, scope=scope)
            if patch.is_active is False and current.is_active:
                updated = updated.deactivate(datetime.now(UTC))
            if updated == current:
                return current

            deactivated = current.is_active and not updated.is_active
            await uow.assignments.update(updated)
            await uow.audit.append([
                audit_entry(
                    actor_id,
                    AuditAction.ROLE_REMOVED if deactivated else AuditAction.ROLE_ASSIGNMENT_UPDATED,
                    "role_assignment",
                    current.id,
                    before=snapshot(current),
                    after=snapshot(updated),
                    subject=current.user_id,
                )
            ])

        invalidate_users(self._cache, [current.user_id])
        return updated
