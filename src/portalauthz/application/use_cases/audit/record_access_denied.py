"""Record access denied use case."""

import logging

from portalauthz.application.use_cases.audit.record_audit import audit_entry
from portalauthz.domain.entities import AuditEntry
from portalauthz.domain.value_objects import AuditAction

logger = logging.getLogger(__name__)


class RecordAccessDeniedUseCase:
    """Append an ``access_denied`` entry when a route guard refuses a request.

    The entry is written in its own unit of work; the denial itself never
    depends on it.
    """

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(
        self,
        user_id: str,
        permission_id: str,
        reason: str,
        *,
        method: str | None = None,
        path: str | None = None,
    ) -> AuditEntry:
        entry = audit_entry(
            user_id,
            AuditAction.ACCESS_DENIED,
            "permission",
            permission_id,
            after={
                "required_permission": permission_id,
                "reason": reason,
                "request_method": method,
                "request_path": path,
            },
            subject=user_id,
        )
        async with self._uow_factory() as uow:
            await uow.audit.append([entry])
        logger.info("Access denied to %s %s for user %s", method, path, user_id)
        return entry
