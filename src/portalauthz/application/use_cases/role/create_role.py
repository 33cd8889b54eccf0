"""Create role use case."""

import logging
from datetime import UTC, datetime
from uuid import uuid4

from portalauthz.application.dto.role_dto import RoleCreateInput
from portalauthz.application.use_cases.audit.record_audit import audit_entry, snapshot
from portalauthz.application.use_cases.role.role_rules import (
    DEFAULT_MAX_LEVEL,
    DEFAULT_MIN_LEVEL,
    validate_role_fields,
)
from portalauthz.domain.entities import Role
from portalauthz.domain.exceptions import DuplicateIdentifier, ValidationError
from portalauthz.domain.value_objects import AuditAction

logger = logging.getLogger(__name__)


class CreateRoleUseCase:
    """Create a role after validating every field at once."""

    def __init__(
        self,
        unit_of_work_factory: type,
        min_level: int = DEFAULT_MIN_LEVEL,
        max_level: int = DEFAULT_MAX_LEVEL,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._min_level = min_level
        self._max_level = max_level

    async def execute(self, actor_id: str, data: RoleCreateInput) -> Role:
        """Create role. ValidationError lists all violated fields."""
        async with self._uow_factory() as uow:
            cleaned, errors = await validate_role_fields(
                uow,
                {
                    "name": data.name,
                    "description": data.description,
                    "category": data.category,
                    "level": data.level,
                    "permission_ids": data.permission_ids or [],
                },
                min_level=self._min_level,
                max_level=self._max_level,
            )
            if errors:
                raise ValidationError(errors)
            if await uow.roles.get_by_name(cleaned["name"]):
                raise DuplicateIdentifier("Role", cleaned["name"])

            now = datetime.now(UTC)
            role = Role(
                id=uuid4(),
                name=cleaned["name"],
                description=cleaned["description"],
                category=cleaned["category"],
                level=cleaned["level"],
                permission_ids=cleaned["permission_ids"],
                is_active=data.is_active,
                is_system_role=data.is_system_role,
                created_by=actor_id,
                created_at=now,
                updated_at=now,
            )
            await uow.roles.create(role)
            await uow.audit.append([
                audit_entry(
                    actor_id,
                    AuditAction.ROLE_CREATED,
                    "role",
                    role.id,
                    after=snapshot(role),
                    timestamp=now,
                )
            ])

        logger.info("Role %r (%s) created by %s", role.name, role.id, actor_id)
        return role
