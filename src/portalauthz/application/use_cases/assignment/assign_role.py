"""Assign role use case."""

import logging
from datetime import UTC, datetime
from uuid import UUID, uuid4

from portalauthz.application.dto.assignment_dto import AssignmentRequest
from portalauthz.application.ports import PermissionCache
from portalauthz.application.use_cases.assignment.planning import plan_assignments
from portalauthz.application.use_cases.cache_invalidation import invalidate_users
from portalauthz.domain.entities import RoleAssignment

logger = logging.getLogger(__name__)


class AssignRoleUseCase:
    """Assign one or more roles to a user, all or nothing."""

    def __init__(
        self,
        unit_of_work_factory: type,
        permission_cache: PermissionCache | None = None,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._cache = permission_cache

    async def execute(
        self,
        user_id: str,
        role_ids: list[UUID],
        assigned_by: str,
        expires_at: datetime | None = None,
        scope: dict[str, str] | None = None,
        notes: str | None = None,
    ) -> list[RoleAssignment]:
        """Create one assignment per role sharing one audit transaction.

        Raises RoleNotFound, RoleInactive or InvalidExpiry before any write.
        """
        request = AssignmentRequest(
            user_id=user_id,
            role_ids=role_ids,
            expires_at=expires_at,
            scope=scope,
            notes=notes,
        )
        async with self._uow_factory() as uow:
            plan = await plan_assignments(
                uow,
                [request],
                assigned_by,
                now=datetime.now(UTC),
                transaction_id=uuid4(),
            )
            await plan.apply(uow)

        invalidate_users(self._cache, plan.user_ids)
        logger.info(
            "Assigned %d role(s) to user %s by %s", len(plan.created), user_id, assigned_by
        )
        return plan.created
