"""List and get role use cases."""

from uuid import UUID

from portalauthz.application.use_cases.validation import parse_choice
from portalauthz.domain.entities import Role
from portalauthz.domain.exceptions import NotFound, ValidationError
from portalauthz.domain.value_objects import RoleCategory


class ListRolesUseCase:
    """List roles ordered by authority level, highest first."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(
        self, category: str | None = None, active_only: bool = False
    ) -> list[Role]:
        errors: dict[str, str] = {}
        parsed = parse_choice(RoleCategory, category, "category", errors) if category else None
        if errors:
            raise ValidationError(errors)

        async with self._uow_factory() as uow:
            roles = await uow.roles.list(category=parsed, active_only=active_only)
        return sorted(roles, key=lambda r: (-r.level, r.name))


class GetRoleUseCase:
    """Fetch one role by id."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, role_id: UUID) -> Role:
        async with self._uow_factory() as uow:
            role = await uow.roles.get_by_id(role_id)
        if not role:
            raise NotFound("Role", role_id)
        return role
