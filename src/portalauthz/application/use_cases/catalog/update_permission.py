"""Update permission use case."""

from dataclasses import replace
from datetime import UTC, datetime

from portalauthz.application.dto.role_dto import PermissionPatch
from portalauthz.application.use_cases.audit.record_audit import audit_entry, snapshot
from portalauthz.application.use_cases.validation import parse_choice
from portalauthz.domain.entities import Permission
from portalauthz.domain.exceptions import NotFound, ValidationError
from portalauthz.domain.value_objects import AuditAction, PermissionCategory


class UpdatePermissionUseCase:
    """Edit name, description or category of a catalog permission. The id is fixed."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(
        self, actor_id: str, permission_id: str, patch: PermissionPatch
    ) -> Permission:
        errors: dict[str, str] = {}
        name = patch.name.strip() if patch.name is not None else None
        if name is not None and not name:
            errors["name"] = "Name must not be empty"
        category = None
        if patch.category is not None:
            category = parse_choice(PermissionCategory, patch.category, "category", errors)
        if errors:
            raise ValidationError(errors)

        async with self._uow_factory() as uow:
            current = await uow.permissions.get_by_id(permission_id)
            if not current:
                raise NotFound("Permission", permission_id)

            updated = replace(
                current,
                name=name if name is not None else current.name,
                description=(
                    patch.description.strip()
                    if patch.description is not None
                    else current.description
                ),
                category=category or current.category,
            )
            if updated == current:
                return current

            updated.updated_at = datetime.now(UTC)
            await uow.permissions.update(updated)
            await uow.audit.append([
                audit_entry(
                    actor_id,
                    AuditAction.PERMISSION_UPDATED,
                    "permission",
                    permission_id,
                    before=snapshot(current),
                    after=snapshot(updated),
                    timestamp=updated.updated_at,
                )
            ])
            return updated
