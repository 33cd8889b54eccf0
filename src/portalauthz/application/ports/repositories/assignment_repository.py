"""Role assignment ledger repository port."""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from portalauthz.domain.entities import RoleAssignment


class AssignmentRepository(Protocol):
    """Port for role assignment persistence. Records are never hard-deleted."""

    async def get_by_id(
        self, assignment_id: UUID, *, for_update: bool = False
    ) -> RoleAssignment | None: ...

    async def list_by_user(
        self, user_id: str, *, include_inactive: bool = True
    ) -> list[RoleAssignment]: ...

    async def list_by_role(
        self, role_id: UUID, *, include_inactive: bool = False
    ) -> list[RoleAssignment]: ...

    async def list_expiring(self, start: datetime, end: datetime) -> list[RoleAssignment]: ...

    async def count_active_by_role(self, at: datetime) -> dict[UUID, int]: ...

    async def count_assigned_since(self, since: datetime) -> int: ...

    async def create_batch(self, assignments: list[RoleAssignment]) -> list[RoleAssignment]: ...

    async def update(self, assignment: RoleAssignment) -> None: ...
