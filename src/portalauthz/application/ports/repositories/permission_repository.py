"""Permission catalog repository port."""

from __future__ import annotations

from typing import Protocol

from portalauthz.domain.entities import Permission
from portalauthz.domain.value_objects import PermissionCategory


class PermissionRepository(Protocol):
    """Port for permission catalog persistence."""

    async def get_by_id(self, permission_id: str) -> Permission | None: ...

    async def get_many(self, permission_ids: list[str]) -> list[Permission]: ...

    async def list(
        self,
        *,
        category: PermissionCategory | None = None,
        search: str | None = None,
    ) -> list[Permission]: ...

    async def create(self, permission: Permission) -> Permission: ...

    async def update(self, permission: Permission) -> None: ...

    async def delete(self, permission_id: str) -> None: ...
