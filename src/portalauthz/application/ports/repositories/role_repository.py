"""Role repository port."""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from portalauthz.domain.entities import Role
from portalauthz.domain.value_objects import RoleCategory


class RoleRepository(Protocol):
    """Port for role persistence."""

    async def get_by_id(self, role_id: UUID, *, for_update: bool = False) -> Role | None: ...

    async def get_by_name(self, name: str) -> Role | None: ...

    async def get_many(self, role_ids: list[UUID]) -> list[Role]: ...

    async def list(
        self,
        *,
        category: RoleCategory | None = None,
        active_only: bool = False,
    ) -> list[Role]: ...

    async def list_referencing_permission(self, permission_id: str) -> list[Role]: ...

    async def create(self, role: Role) -> Role: ...

    async def update(self, role: Role) -> None: ...

    async def delete(self, role_id: UUID) -> None: ...
