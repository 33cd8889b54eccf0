"""List and get permission use cases."""

from portalauthz.application.use_cases.validation import parse_choice
from portalauthz.domain.entities import Permission
from portalauthz.domain.exceptions import NotFound, ValidationError
from portalauthz.domain.value_objects import PermissionCategory


class ListPermissionsUseCase:
    """List catalog permissions, optionally by category and free-text search."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(
        self, category: str | None = None, search: str | None = None
    ) -> list[Permission]:
        errors: dict[str, str] = {}
        parsed = parse_choice(PermissionCategory, category, "category", errors) if category else None
        if errors:
            raise ValidationError(errors)

        async with self._uow_factory() as uow:
            return await uow.permissions.list(
                category=parsed,
                search=(search or "").strip() or None,
            )


class GetPermissionUseCase:
    """Fetch one permission by identifier."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, permission_id: str) -> Permission:
        async with self._uow_factory() as uow:
            permission = await uow.permissions.get_by_id(permission_id)
        if not permission:
            raise NotFound("Permission", permission_id)
        return permission


class ListPermissionCategoriesUseCase:
    """Every permission category with the number of catalog entries in it."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self) -> list[tuple[PermissionCategory, int]]:
        async with self._uow_factory() as uow:
            permissions = await uow.permissions.list()
        counts = {category: 0 for category in PermissionCategory}
        for permission in permissions:
            counts[permission.category] += 1
        return list(counts.items())
