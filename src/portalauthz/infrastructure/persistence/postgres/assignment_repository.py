"""PostgreSQL role assignment repository implementation."""

from datetime import datetime
from uuid import UUID

from psycopg import AsyncConnection
from psycopg.types.json import Jsonb

from portalauthz.domain.entities import RoleAssignment
from portalauthz.domain.value_objects import AssignmentReason

_COLUMNS = (
    "id, user_id, role_id, assigned_by, assigned_at, expires_at, scope, is_active, "
    "reason, notes, deactivated_at"
)


def _row_to_assignment(r: tuple) -> RoleAssignment:
    return RoleAssignment(
        id=r[0],
        user_id=r[1],
        role_id=r[2],
        assigned_by=r[3],
        assigned_at=r[4],
        expires_at=r[5],
        scope=r[6],
        is_active=r[7],
        reason=AssignmentReason(r[8]),
        notes=r[9],
        deactivated_at=r[10],
    )


class PostgresAssignmentRepository:
    """Role assignment repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(
        self, assignment_id: UUID, *, for_update: bool = False
    ) -> RoleAssignment | None:
        """Get assignment by id."""
        q = f"SELECT {_COLUMNS} FROM role_assignment WHERE id = %s"
        if for_update:
            q += " FOR UPDATE"
        cur = await self._conn.execute(q, (assignment_id,))
        r = await cur.fetchone()
        return _row_to_assignment(r) if r else None

    async def list_by_user(
        self, user_id: str, *, include_inactive: bool = True
    ) -> list[RoleAssignment]:
        """List assignments for user."""
        q = f"SELECT {_COLUMNS} FROM role_assignment WHERE user_id = %s"
        if not include_inactive:
            q += " AND is_active"
        cur = await self._conn.execute(q + " ORDER BY assigned_at", (user_id,))
        return [_row_to_assignment(r) for r in await cur.fetchall()]

    async def list_by_role(
        self, role_id: UUID, *, include_inactive: bool = False
    ) -> list[RoleAssignment]:
        """List assignments referencing role."""
        q = f"SELECT {_COLUMNS} FROM role_assignment WHERE role_id = %s"
        if not include_inactive:
            q += " AND is_active"
        cur = await self._conn.execute(q + " ORDER BY assigned_at", (role_id,))
        return [_row_to_assignment(r) for r in await cur.fetchall()]

    async def list_expiring(self, start: datetime, end: datetime) -> list[RoleAssignment]:
        """Active assignments expiring in [start, end]."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM role_assignment "
            "WHERE is_active AND expires_at BETWEEN %s AND %s ORDER BY expires_at",
            (start, end),
        )
        return [_row_to_assignment(r) for r in await cur.fetchall()]

    async def count_active_by_role(self, at: datetime) -> dict[UUID, int]:
        """Active, unexpired assignments made by ``at``, per role."""
        cur = await self._conn.execute(
            "SELECT role_id, count(*) FROM role_assignment "
            "WHERE is_active AND assigned_at <= %s AND (expires_at IS NULL OR expires_at > %s) "
            "GROUP BY role_id",
            (at, at),
        )
        return {r[0]: r[1] for r in await cur.fetchall()}

    async def count_assigned_since(self, since: datetime) -> int:
        """Assignments made at or after ``since``, whatever their state."""
        cur = await self._conn.execute(
            "SELECT count(*) FROM role_assignment WHERE assigned_at >= %s", (since,)
        )
        r = await cur.fetchone()
        return r[0] if r else 0

    async def create_batch(self, assignments: list[RoleAssignment]) -> list[RoleAssignment]:
        """Insert assignments."""
        async with self._conn.cursor() as cur:
            await cur.executemany(
                f"INSERT INTO role_assignment ({_COLUMNS}) "
                "VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)",
                [
                    (
                        a.id,
                        a.user_id,
                        a.role_id,
                        a.assigned_by,
                        a.assigned_at,
                        a.expires_at,
                        Jsonb(a.scope) if a.scope is not None else None,
                        a.is_active,
                        a.reason.value,
                        a.notes,
                        a.deactivated_at,
                    )
                    for a in assignments
                ],
            )
        return assignments

    async def update(self, assignment: RoleAssignment) -> None:
        """Update the mutable fields of an assignment."""
        await self._conn.execute(
            "UPDATE role_assignment SET expires_at=%s, scope=%s, is_active=%s, deactivated_at=%s "
            "WHERE id=%s",
            (
                assignment.expires_at,
                Jsonb(assignment.scope) if assignment.scope is not None else None,
                assignment.is_active,
                assignment.deactivated_at,
                assignment.id,
            ),
        )
