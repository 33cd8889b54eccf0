"""PostgreSQL Unit of Work implementation."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import psycopg
from psycopg_pool import AsyncConnectionPool, PoolTimeout

from portalauthz.domain.exceptions import StoreUnavailable
from portalauthz.infrastructure.persistence.postgres.assignment_repository import (
    PostgresAssignmentRepository,
)
from portalauthz.infrastructure.persistence.postgres.audit_repository import (
    PostgresAuditRepository,
)
from portalauthz.infrastructure.persistence.postgres.permission_repository import (
    PostgresPermissionRepository,
)
from portalauthz.infrastructure.persistence.postgres.role_repository import (
    PostgresRoleRepository,
)


class PostgresUnitOfWork:
    """PostgreSQL Unit of Work - one connection, one REPEATABLE READ transaction.

    Every read inside the unit sees the same snapshot, and every statement is
    bounded by ``statement_timeout``.
    """

    def __init__(self, pool: AsyncConnectionPool, timeout_ms: int = 2000) -> None:
        self._pool = pool
        self._timeout_ms = timeout_ms
        self._conn: psycopg.AsyncConnection | None = None
        self._conn_cm: object | None = None

    async def __aenter__(self) -> "PostgresUnitOfWork":
        self._conn_cm = self._pool.connection()
        self._conn = await self._conn_cm.__aenter__()
        await self._conn.execute("SET TRANSACTION ISOLATION LEVEL REPEATABLE READ")
        await self._conn.execute(
            "SELECT set_config('statement_timeout', %s, true)", (str(self._timeout_ms),)
        )
        self._permissions = PostgresPermissionRepository(self._conn)
        self._roles = PostgresRoleRepository(self._conn)
        self._assignments = PostgresAssignmentRepository(self._conn)
        self._audit = PostgresAuditRepository(self._conn)
        return self

    async def __aexit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        if exc_type and self._conn:
            await self._conn.rollback()
        if self._conn_cm:
            await self._conn_cm.__aexit__(exc_type, exc_val, exc_tb)

    @property
    def permissions(self) -> PostgresPermissionRepository:
        return self._permissions

    @property
    def roles(self) -> PostgresRoleRepository:
        return self._roles

    @property
    def assignments(self) -> PostgresAssignmentRepository:
        return self._assignments

    @property
    def audit(self) -> PostgresAuditRepository:
        return self._audit

    async def commit(self) -> None:
        if self._conn:
            await self._conn.commit()

    async def rollback(self) -> None:
        if self._conn:
            await self._conn.rollback()


def create_uow_factory(pool: AsyncConnectionPool, timeout_ms: int = 2000) -> object:
    """Create UnitOfWork factory (async context manager).

    Connection failures, pool exhaustion and statement timeouts surface as
    StoreUnavailable.
    """

    @asynccontextmanager
    async def factory() -> AsyncIterator[PostgresUnitOfWork]:
        try:
            uow = PostgresUnitOfWork(pool, timeout_ms)
            async with uow:
                try:
                    yield uow
                    await uow.commit()
                except BaseException:
                    await uow.rollback()
                    raise
        except (psycopg.OperationalError, PoolTimeout) as e:
            raise StoreUnavailable(str(e)) from e

    return factory
