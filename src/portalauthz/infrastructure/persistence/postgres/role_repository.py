"""PostgreSQL role repository implementation."""

from __future__ import annotations

from uuid import UUID

from psycopg import AsyncConnection, errors

from portalauthz.domain.entities import Role
from portalauthz.domain.exceptions import DuplicateIdentifier
from portalauthz.domain.value_objects import RoleCategory

# Permission ids are aggregated in their stored order.
_SELECT = (
    "SELECT r.id, r.name, r.description, r.category, r.level, r.is_active, "
    "r.is_system_role, r.version, r.created_by, r.created_at, r.updated_at, "
    "ARRAY(SELECT rp.permission_id FROM role_permission rp "
    "WHERE rp.role_id = r.id ORDER BY rp.position) "
    "FROM role r"
)


def _row_to_role(r: tuple) -> Role:
    return Role(
        id=r[0],
        name=r[1],
        description=r[2],
        category=RoleCategory(r[3]),
        level=r[4],
        is_active=r[5],
        is_system_role=r[6],
        version=r[7],
        created_by=r[8],
        created_at=r[9],
        updated_at=r[10],
        permission_ids=list(r[11]),
    )


class PostgresRoleRepository:
    """Role repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, role_id: UUID, *, for_update: bool = False) -> Role | None:
        """Get role by id, optionally locking the row for a read-modify-write."""
        q = f"{_SELECT} WHERE r.id = %s"
        if for_update:
            q += " FOR UPDATE OF r"
        cur = await self._conn.execute(q, (role_id,))
        r = await cur.fetchone()
        return _row_to_role(r) if r else None

    async def get_by_name(self, name: str) -> Role | None:
        """Get role by name (case-insensitive)."""
        cur = await self._conn.execute(f"{_SELECT} WHERE lower(r.name) = lower(%s)", (name,))
        r = await cur.fetchone()
        return _row_to_role(r) if r else None

    async def get_many(self, role_ids: list[UUID]) -> list[Role]:
        """Get roles by ids; missing ids are skipped."""
        if not role_ids:
            return []
        cur = await self._conn.execute(f"{_SELECT} WHERE r.id = ANY(%s)", (list(role_ids),))
        return [_row_to_role(r) for r in await cur.fetchall()]

    async def list(
        self,
        *,
        category: RoleCategory | None = None,
        active_only: bool = False,
    ) -> list[Role]:
        """List roles."""
        conditions = []
        params: list[object] = []
        if category:
            conditions.append("r.category = %s")
            params.append(category.value)
        if active_only:
            conditions.append("r.is_active")
        where = (" WHERE " + " AND ".join(conditions)) if conditions else ""
        cur = await self._conn.execute(
            f"{_SELECT}{where} ORDER BY r.level DESC, r.name", tuple(params)
        )
        return [_row_to_role(r) for r in await cur.fetchall()]

    async def list_referencing_permission(self, permission_id: str) -> list[Role]:
        """Roles whose permission set contains ``permission_id``."""
        cur = await self._conn.execute(
            f"{_SELECT} WHERE r.id IN "
            "(SELECT role_id FROM role_permission WHERE permission_id = %s)",
            (permission_id,),
        )
        return [_row_to_role(r) for r in await cur.fetchall()]

    async def _replace_permissions(self, role: Role) -> None:
        await self._conn.execute("DELETE FROM role_permission WHERE role_id = %s", (role.id,))
        if role.permission_ids:
            async with self._conn.cursor() as cur:
                await cur.executemany(
                    "INSERT INTO role_permission (role_id, permission_id, position) "
                    "VALUES (%s, %s, %s)",
                    [(role.id, p, i) for i, p in enumerate(role.permission_ids)],
                )

    async def create(self, role: Role) -> Role:
        """Create role with its permission set. A taken name raises DuplicateIdentifier."""
        try:
            await self._conn.execute(
                "INSERT INTO role (id, name, description, category, level, is_active, "
                "is_system_role, version, created_by, created_at, updated_at) "
                "VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)",
                (
                    role.id,
                    role.name,
                    role.description,
                    role.category.value,
                    role.level,
                    role.is_active,
                    role.is_system_role,
                    role.version,
                    role.created_by,
                    role.created_at,
                    role.updated_at,
                ),
            )
        except errors.UniqueViolation as e:
            raise DuplicateIdentifier("Role", role.name) from e
        await self._replace_permissions(role)
        return role

    async def update(self, role: Role) -> None:
        """Update role fields and rewrite its permission set."""
        try:
            await self._conn.execute(
                "UPDATE role SET name=%s, description=%s, category=%s, level=%s, is_active=%s, "
                "version=%s, updated_at=%s WHERE id=%s",
                (
                    role.name,
                    role.description,
                    role.category.value,
                    role.level,
                    role.is_active,
                    role.version,
                    role.updated_at,
                    role.id,
                ),
            )
        except errors.UniqueViolation as e:
            raise DuplicateIdentifier("Role", role.name) from e
        await self._replace_permissions(role)

    async def delete(self, role_id: UUID) -> None:
        """Delete role; role_permission rows cascade."""
        await self._conn.execute("DELETE FROM role WHERE id = %s", (role_id,))
