"""Remove assignment use case - logical removal only."""

import logging
from datetime import UTC, datetime
from uuid import UUID

from portalauthz.application.ports import PermissionCache
from portalauthz.application.use_cases.audit.record_audit import audit_entry, snapshot
from portalauthz.application.use_cases.cache_invalidation import invalidate_users
from portalauthz.domain.entities import RoleAssignment
from portalauthz.domain.exceptions import NotFound
from portalauthz.domain.value_objects import AuditAction

logger = logging.getLogger(__name__)


class RemoveAssignmentUseCase:
    """Deactivate an assignment, keeping the record for history."""

    def __init__(
        self,
        unit_of_work_factory: type,
        permission_cache: PermissionCache | None = None,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._cache = permission_cache

    async def execute(self, actor_id: str, assignment_id: UUID) -> RoleAssignment:
        """Idempotent; removing an already removed assignment writes nothing."""
        async with self._uow_factory() as uow:
            current = await uow.assignments.get_by_id(assignment_id, for_update=True)
            if not current:
                raise NotFound("RoleAssignment", assignment_id)
            if not current.is_active:
                return current

            removed = current.deactivate(datetime.now(UTC))
            await uow.assignments.update(removed)
            await uow.audit.append([
                audit_entry(
                    actor_id,
                    AuditAction.ROLE_REMOVED,
                    "role_assignment",
                    current.id,
                    before=snapshot(current),
                    after=snapshot(removed),
                    subject=current.user_id,
                )
            ])

        invalidate_users(self._cache, [current.user_id])
        logger.info(
            "Assignment %s of user %s removed by %s", assignment_id, current.user_id, actor_id
        )
        return removed
