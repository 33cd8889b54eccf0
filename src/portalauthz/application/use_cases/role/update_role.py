"""Update role use case."""

import logging
from dataclasses import replace
from datetime import UTC, datetime
from uuid import UUID

from portalauthz.application.dto.role_dto import RolePatch
from portalauthz.application.ports import PermissionCache
from portalauthz.application.use_cases.audit.record_audit import audit_entry, snapshot
from portalauthz.application.use_cases.cache_invalidation import invalidate_users
from portalauthz.application.use_cases.role.role_rules import (
    DEFAULT_MAX_LEVEL,
    DEFAULT_MIN_LEVEL,
    validate_role_fields,
)
from portalauthz.domain.entities import Role
from portalauthz.domain.exceptions import (
    DuplicateIdentifier,
    NotFound,
    SystemRoleImmutable,
    ValidationError,
)
from portalauthz.domain.value_objects import AuditAction

logger = logging.getLogger(__name__)


def _changed_fields(role: Role, patch: RolePatch) -> list[str]:
    changed = []
    for name, value in patch.provided().items():
        current = getattr(role, name)
        if name == "permission_ids":
            value = list(dict.fromkeys(value))
        elif isinstance(value, str):
            value = value.strip()
            if name == "category":
                value = value.lower()
        if value != current:
            changed.append(name)
    return changed


class UpdateRoleUseCase:
    """Apply a partial update to a role.

    System roles only accept ``is_active`` changes; anything else raises
    SystemRoleImmutable and leaves the role untouched.
    """

    def __init__(
        self,
        unit_of_work_factory: type,
        permission_cache: PermissionCache | None = None,
        min_level: int = DEFAULT_MIN_LEVEL,
        max_level: int = DEFAULT_MAX_LEVEL,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._cache = permission_cache
        self._min_level = min_level
        self._max_level = max_level

    async def execute(self, actor_id: str, role_id: UUID, patch: RolePatch) -> Role:
        async with self._uow_factory() as uow:
            role = await uow.roles.get_by_id(role_id, for_update=True)
            if not role:
                raise NotFound("Role", role_id)

            changed = _changed_fields(role, patch)
            if role.is_system_role:
                protected = [f for f in changed if f != "is_active"]
                if protected:
                    raise SystemRoleImmutable(role.name, protected)
            if not changed:
                return role

            provided = patch.provided()
            cleaned, errors = await validate_role_fields(
                uow,
                {f: provided[f] for f in changed},
                min_level=self._min_level,
                max_level=self._max_level,
            )
            if errors:
                raise ValidationError(errors)
            if "name" in cleaned:
                other = await uow.roles.get_by_name(cleaned["name"])
                if other and other.id != role.id:
                    raise DuplicateIdentifier("Role", cleaned["name"])

            updated = replace(
                role,
                **cleaned,
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
                    before=snapshot(role),
                    after=snapshot(updated),
                    timestamp=updated.updated_at,
                )
            ])
            holders = [a.user_id for a in await uow.assignments.list_by_role(role.id)]

        invalidate_users(self._cache, holders)
        if "is_active" in cleaned and not updated.is_active:
            logger.info("Role %r deactivated by %s", role.name, actor_id)
        return updated
