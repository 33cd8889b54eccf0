"""PostgreSQL repositories: unique constraint violations surface as DuplicateIdentifier."""

from unittest.mock import AsyncMock

import pytest
from psycopg import errors

from portalauthz.domain.exceptions import DuplicateIdentifier
from portalauthz.infrastructure.persistence.postgres.permission_repository import (
    PostgresPermissionRepository,
)
from portalauthz.infrastructure.persistence.postgres.role_repository import (
    PostgresRoleRepository,
)

from tests.conftest import make_permission, make_role


def _conn_rejecting(constraint: str) -> AsyncMock:
    conn = AsyncMock()
    conn.execute.side_effect = errors.UniqueViolation(
        f'duplicate key value violates unique constraint "{constraint}"'
    )
    return conn


@pytest.mark.asyncio
async def test_role_name_taken_concurrently() -> None:
    conn = _conn_rejecting("ix_role_name_lower")
    repo = PostgresRoleRepository(conn)

    with pytest.raises(DuplicateIdentifier) as exc_info:
        await repo.create(make_role("Registrar", ["grades:edit"]))

    assert exc_info.value.identifier == "Registrar"
    conn.cursor.assert_not_called()


@pytest.mark.asyncio
async def test_role_renamed_onto_taken_name() -> None:
    repo = PostgresRoleRepository(_conn_rejecting("ix_role_name_lower"))

    with pytest.raises(DuplicateIdentifier, match="Bursar"):
        await repo.update(make_role("Bursar"))


@pytest.mark.asyncio
async def test_permission_id_taken_concurrently() -> None:
    repo = PostgresPermissionRepository(_conn_rejecting("permission_pkey"))

    with pytest.raises(DuplicateIdentifier) as exc_info:
        await repo.create(make_permission("grades:edit"))

    assert exc_info.value.resource == "Permission"
    assert exc_info.value.identifier == "grades:edit"
