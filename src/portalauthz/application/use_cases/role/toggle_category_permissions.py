"""Bulk toggle of a permission category on a role."""

from dataclasses import replace
from datetime import UTC, datetime
from uuid import UUID

from portalauthz.application.ports import PermissionCache
from portalauthz.application.use_cases.audit.record_audit import audit_entry
from portalauthz.application.use_cases.cache_invalidation import invalidate_users
from portalauthz.application.use_cases.validation import parse_choice
from portalauthz.domain.entities import Role
from portalauthz.domain.exceptions import NotFound, SystemRoleImmutable, ValidationError
from portalauthz.domain.value_objects import AuditAction, PermissionCategory


class ToggleCategoryPermissionsUseCase:
    """Add or remove every catalog permission of one category in a single update."""

    def __init__(
        self,
        unit_of_work_factory: type,
        permission_cache: PermissionCache | None = None,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._cache = permission_cache

    async def execute(
        self, actor_id: str, role_id: UUID, category: str, select: bool
    ) -> Role:
        """Idempotent: permissions already in the desired state are left alone."""
        errors: dict[str, str] = {}
        parsed = parse_choice(PermissionCategory, category, "category", errors)
        if errors:
            raise ValidationError(errors)

        async with self._uow_factory() as uow:
            role = await uow.roles.get_by_id(role_id, for_update=True)
            if not role:
                raise NotFound("Role", role_id)
            if role.is_system_role:
                raise SystemRoleImmutable(role.name, ["permission_ids"])

            category_ids = [p.id for p in await uow.permissions.list(category=parsed)]
            if select:
                permission_ids = role.permission_ids + [
                    p for p in category_ids if p not in role.permission_ids
                ]
            else:
                drop = set(category_ids)
                permission_ids = [p for p in role.permission_ids if p not in drop]
            if permission_ids == role.permission_ids:
                return role

            updated = replace(
                role,
                permission_ids=permission_ids,
                version=role.version + 1,
                updated_at=datetime.now(UTC),
            )
            await uow.roles.update(updated)
            await uow.audit.append([
                audit_entry(
                    actor_id,
                    AuditAction.ROLE_UPDATED,
                    "role",
                    role.id,
                    before={"permission_ids": role.permission_ids},
                    after={
                        "permission_ids": updated.permission_ids,
                        "category": parsed.value,
                        "select": select,
                    },
                    timestamp=updated.updated_at,
                )
            ])
            holders = [a.user_id for a in await uow.assignments.list_by_role(role.id)]

        invalidate_users(self._cache, holders)
        return updated
