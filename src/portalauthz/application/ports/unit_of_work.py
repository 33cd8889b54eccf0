"""Unit of Work port - transactional boundary."""

from collections.abc import AsyncIterator
from typing import Protocol

from portalauthz.application.ports.repositories.assignment_repository import (
    AssignmentRepository,
)
from portalauthz.application.ports.repositories.audit_repository import AuditRepository
from portalauthz.application.ports.repositories.permission_repository import (
    PermissionRepository,
)
from portalauthz.application.ports.repositories.role_repository import RoleRepository


class UnitOfWork(Protocol):
    """Unit of Work - one snapshot-consistent transaction over all RBAC collections."""

    @property
    def permissions(self) -> PermissionRepository: ...

    @property
    def roles(self) -> RoleRepository: ...

    @property
    def assignments(self) -> AssignmentRepository: ...

    @property
    def audit(self) -> AuditRepository: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...


class UnitOfWorkFactory(Protocol):
    """Factory for creating UnitOfWork instances."""

    async def __call__(self) -> AsyncIterator[UnitOfWork]: ...
