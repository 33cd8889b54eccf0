"""Delete permission use case."""

import logging

from portalauthz.application.use_cases.audit.record_audit import audit_entry, snapshot
from portalauthz.domain.exceptions import NotFound, ReferentialConflict
from portalauthz.domain.value_objects import AuditAction

logger = logging.getLogger(__name__)


class DeletePermissionUseCase:
    """Remove a permission from the catalog while no role references it."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, actor_id: str, permission_id: str) -> None:
        """Raises ReferentialConflict listing the referencing role names."""
        async with self._uow_factory() as uow:
            permission = await uow.permissions.get_by_id(permission_id)
            if not permission:
                raise NotFound("Permission", permission_id)

            roles = await uow.roles.list_referencing_permission(permission_id)
            if roles:
                raise ReferentialConflict(
                    "Permission", permission_id, sorted(r.name for r in roles)
                )

            await uow.permissions.delete(permission_id)
            await uow.audit.append([
                audit_entry(
                    actor_id,
                    AuditAction.PERMISSION_DELETED,
                    "permission",
                    permission_id,
                    before=snapshot(permission),
                )
            ])

        logger.info("Permission %s deleted by %s", permission_id, actor_id)
