"""Clone role use case."""

from datetime import UTC, datetime
from uuid import UUID, uuid4

from portalauthz.application.use_cases.audit.record_audit import audit_entry, snapshot
from portalauthz.domain.entities import Role
from portalauthz.domain.exceptions import DuplicateIdentifier, NotFound, ValidationError
from portalauthz.domain.value_objects import AuditAction


class CloneRoleUseCase:
    """Copy a role's permissions, category and level into a new custom role."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, actor_id: str, role_id: UUID, new_name: str) -> Role:
        """The clone is never a system role and starts active."""
        name = (new_name or "").strip()
        if not name:
            raise ValidationError({"name": "Name is required"})

        async with self._uow_factory() as uow:
            source = await uow.roles.get_by_id(role_id)
            if not source:
                raise NotFound("Role", role_id)
            if await uow.roles.get_by_name(name):
                raise DuplicateIdentifier("Role", name)

            now = datetime.now(UTC)
            clone = Role(
                id=uuid4(),
                name=name,
                description=f"{source.description} (Copy)".strip(),
                category=source.category,
                level=source.level,
                permission_ids=list(source.permission_ids),
                is_active=True,
                is_system_role=False,
                created_by=actor_id,
                created_at=now,
                updated_at=now,
            )
            await uow.roles.create(clone)
            await uow.audit.append([
                audit_entry(
                    actor_id,
                    AuditAction.ROLE_CLONED,
                    "role",
                    clone.id,
                    before={"cloned_from": str(source.id), "source_name": source.name},
                    after=snapshot(clone),
                    timestamp=now,
                )
            ])
        return clone
