"""Create permission use case."""

import logging
from datetime import UTC, datetime

from portalauthz.application.dto.role_dto import PermissionCreateInput
from portalauthz.application.use_cases.audit.record_audit import audit_entry, snapshot
from portalauthz.application.use_cases.validation import parse_choice
from portalauthz.domain.entities import Permission
from portalauthz.domain.exceptions import DuplicateIdentifier, ValidationError
from portalauthz.domain.value_objects import (
    AuditAction,
    PermissionCategory,
    is_valid_permission_id,
)

logger = logging.getLogger(__name__)


class CreatePermissionUseCase:
    """Register a permission in the catalog."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, actor_id: str, data: PermissionCreateInput) -> Permission:
        """Create permission. Raises DuplicateIdentifier if the id is taken."""
        errors: dict[str, str] = {}
        permission_id = (data.id or "").strip()
        if not is_valid_permission_id(permission_id):
            errors["id"] = "Identifier must look like 'resource:action'"
        name = (data.name or "").strip()
        if not name:
            errors["name"] = "Name is required"
        category = parse_choice(PermissionCategory, data.category, "category", errors)
        if errors:
            raise ValidationError(errors)

        async with self._uow_factory() as uow:
            if await uow.permissions.get_by_id(permission_id):
                raise DuplicateIdentifier("Permission", permission_id)

            now = datetime.now(UTC)
            permission = Permission(
                id=permission_id,
                name=name,
                description=(data.description or "").strip(),
                category=category,
                created_at=now,
                updated_at=now,
            )
            await uow.permissions.create(permission)
            await uow.audit.append([
                audit_entry(
                    actor_id,
                    AuditAction.PERMISSION_CREATED,
                    "permission",
                    permission_id,
                    after=snapshot(permission),
                    timestamp=now,
                )
            ])

        logger.info("Permission %s created by %s", permission_id, actor_id)
        return permission
