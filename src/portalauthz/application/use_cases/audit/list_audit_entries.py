"""List audit entries use case - historical reporting only."""

from datetime import datetime

from portalauthz.domain.entities import AuditEntry
from portalauthz.domain.exceptions import ValidationError
from portalauthz.domain.value_objects import AuditAction

_ROLE_HISTORY_ACTIONS = [
    AuditAction.ROLE_ASSIGNED,
    AuditAction.ROLE_ASSIGNMENT_UPDATED,
    AuditAction.ROLE_REMOVED,
]


class ListAuditEntriesUseCase:
    """Query the append-only audit log. Never consulted for live decisions."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(
        self,
        *,
        actor: str | None = None,
        subject: str | None = None,
        target_id: str | None = None,
        actions: list[str] | None = None,
        since: datetime | None = None,
        until: datetime | None = None,
        limit: int = 100,
    ) -> list[AuditEntry]:
        """Newest first."""
        parsed: list[AuditAction] | None = None
        if actions:
            try:
                parsed = [AuditAction(a) for a in actions]
            except ValueError as e:
                raise ValidationError({"actions": str(e)}) from e
        if since and until and since > until:
            raise ValidationError({"since": "since must not be after until"})
        limit = min(max(limit, 1), 500)

        async with self._uow_factory() as uow:
            return await uow.audit.list(
                actor=actor,
                subject=subject,
                target_id=target_id,
                actions=parsed,
                since=since,
                until=until,
                limit=limit,
            )

    async def role_history(self, user_id: str, limit: int = 100) -> list[AuditEntry]:
        """Assignment events affecting ``user_id``."""
        async with self._uow_factory() as uow:
            return await uow.audit.list(
                subject=user_id,
                actions=list(_ROLE_HISTORY_ACTIONS),
                limit=min(max(limit, 1), 500),
            )
