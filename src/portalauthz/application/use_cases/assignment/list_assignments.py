"""Assignment listing use cases."""

from datetime import UTC, datetime, timedelta
from uuid import UUID

from portalauthz.application.use_cases.validation import ensure_utc
from portalauthz.domain.entities import RoleAssignment
from portalauthz.domain.exceptions import NotFound, ValidationError


class ListUserAssignmentsUseCase:
    """Assignments of one user, newest first."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, user_id: str, include_inactive: bool = False) -> list[RoleAssignment]:
        async with self._uow_factory() as uow:
            items = await uow.assignments.list_by_user(
                user_id, include_inactive=include_inactive
            )
        return sorted(items, key=lambda a: a.assigned_at, reverse=True)


class ListRoleAssignmentsUseCase:
    """Assignments referencing one role, optionally only those in effect at a time."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(
        self,
        role_id: UUID,
        include_inactive: bool = False,
        in_effect_at: datetime | None = None,
    ) -> list[RoleAssignment]:
        async with self._uow_factory() as uow:
            role = await uow.roles.get_by_id(role_id)
            if not role:
                raise NotFound("Role", role_id)
            items = await uow.assignments.list_by_role(
                role_id, include_inactive=include_inactive or in_effect_at is not None
            )
        if in_effect_at is not None:
            at = ensure_utc(in_effect_at)
            items = [a for a in items if a.is_in_effect_at(at, role.is_active)]
        return sorted(items, key=lambda a: a.assigned_at, reverse=True)


class ListExpiringAssignmentsUseCase:
    """Active assignments whose expiry falls within the coming window."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(
        self, within: timedelta = timedelta(days=30), now: datetime | None = None
    ) -> list[RoleAssignment]:
        if within <= timedelta(0):
            raise ValidationError({"within": "Window must be positive"})
        start = ensure_utc(now) if now else datetime.now(UTC)
        async with self._uow_factory() as uow:
            items = await uow.assignments.list_expiring(start, start + within)
        return sorted(items, key=lambda a: a.expires_at)
