"""Delete role use case."""

import logging
from uuid import UUID

from portalauthz.application.use_cases.audit.record_audit import audit_entry, snapshot
from portalauthz.domain.exceptions import NotFound, ReferentialConflict, SystemRoleImmutable
from portalauthz.domain.value_objects import AuditAction

logger = logging.getLogger(__name__)


class DeleteRoleUseCase:
    """Delete a custom role that no assignment has ever referenced.

    Inactive assignments count too: they are the ledger's history and must
    keep resolving to a role. Deactivate the role instead.
    """

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, actor_id: str, role_id: UUID) -> None:
        async with self._uow_factory() as uow:
            role = await uow.roles.get_by_id(role_id, for_update=True)
            if not role:
                raise NotFound("Role", role_id)
            if role.is_system_role:
                raise SystemRoleImmutable(role.name)

            references = await uow.assignments.list_by_role(role_id, include_inactive=True)
            if references:
                raise ReferentialConflict("Role", role.name, [str(a.id) for a in references])

            await uow.roles.delete(role_id)
            await uow.audit.append([
                audit_entry(
                    actor_id,
                    AuditAction.ROLE_DELETED,
                    "role",
                    role_id,
                    before=snapshot(role),
                )
            ])

        logger.info("Role %r (%s) deleted by %s", role.name, role_id, actor_id)
