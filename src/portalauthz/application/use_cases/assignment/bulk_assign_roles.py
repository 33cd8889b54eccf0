"""Bulk assign roles use case."""

import logging
from datetime import UTC, datetime
from uuid import uuid4

from portalauthz.application.dto.assignment_dto import AssignmentRequest
from portalauthz.application.ports import PermissionCache
from portalauthz.application.use_cases.assignment.planning import plan_assignments
from portalauthz.application.use_cases.audit.record_audit import audit_entry
from portalauthz.application.use_cases.cache_invalidation import invalidate_users
from portalauthz.domain.entities import RoleAssignment
from portalauthz.domain.value_objects import AssignmentReason, AuditAction

logger = logging.getLogger(__name__)


class BulkAssignRolesUseCase:
    """Assign roles to many users in one batch. Any failure aborts the whole batch."""

    def __init__(
        self,
        unit_of_work_factory: type,
        permission_cache: PermissionCache | None = None,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._cache = permission_cache

    async def execute(
        self, requests: list[AssignmentRequest], assigned_by: str
    ) -> list[RoleAssignment]:
        now = datetime.now(UTC)
        transaction_id = uuid4()
        async with self._uow_factory() as uow:
            plan = await plan_assignments(
                uow,
                requests,
                assigned_by,
                now=now,
                transaction_id=transaction_id,
                reason=AssignmentReason.BULK,
            )
            plan.audit.append(
                audit_entry(
                    assigned_by,
                    AuditAction.BULK_ASSIGNMENT,
                    "role_assignment_batch",
                    transaction_id,
                    transaction_id=transaction_id,
                    after={
                        "users": sorted(plan.user_ids),
                        "assignments": len(plan.created),
                        "superseded": len(plan.superseded),
                    },
                    timestamp=now,
                )
            )
            await plan.apply(uow)

        invalidate_users(self._cache, plan.user_ids)
        logger.info(
            "Bulk assignment %s: %d assignment(s) for %d user(s)",
            transaction_id,
            len(plan.created),
            len(plan.user_ids),
        )
        return plan.created
