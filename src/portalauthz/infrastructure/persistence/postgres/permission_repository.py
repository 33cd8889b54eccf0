"""PostgreSQL permission catalog repository implementation."""

from __future__ import annotations

from psycopg import AsyncConnection, errors

from portalauthz.domain.entities import Permission
from portalauthz.domain.exceptions import DuplicateIdentifier
from portalauthz.domain.value_objects import PermissionCategory

_COLUMNS = "id, name, description, category, created_at, updated_at"


def _row_to_permission(r: tuple) -> Permission:
    return Permission(
        id=r[0],
        name=r[1],
        description=r[2],
        category=PermissionCategory(r[3]),
        created_at=r[4],
        updated_at=r[5],
    )


class PostgresPermissionRepository:
    """Permission repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, permission_id: str) -> Permission | None:
        """Get permission by id."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM permission WHERE id = %s",
            (permission_id,),
        )
        r = await cur.fetchone()
        return _row_to_permission(r) if r else None

    async def get_many(self, permission_ids: list[str]) -> list[Permission]:
        """Get the permissions among ``permission_ids`` that exist."""
        if not permission_ids:
            return []
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM permission WHERE id = ANY(%s)",
            (list(permission_ids),),
        )
        return [_row_to_permission(r) for r in await cur.fetchall()]

    async def list(
        self,
        *,
        category: PermissionCategory | None = None,
        search: str | None = None,
    ) -> list[Permission]:
        """List permissions filtered by category and case-insensitive search."""
        conditions = []
        params: list[object] = []
        if category:
            conditions.append("category = %s")
            params.append(category.value)
        if search:
            conditions.append("(id ILIKE %s OR name ILIKE %s OR description ILIKE %s)")
            pattern = f"%{search}%"
            params.extend([pattern, pattern, pattern])
        where = (" WHERE " + " AND ".join(conditions)) if conditions else ""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM permission{where} ORDER BY category, id",
            tuple(params),
        )
        return [_row_to_permission(r) for r in await cur.fetchall()]

    async def create(self, permission: Permission) -> Permission:
        """Create permission. A taken id raises DuplicateIdentifier."""
        try:
            await self._conn.execute(
                f"INSERT INTO permission ({_COLUMNS}) VALUES (%s, %s, %s, %s, %s, %s)",
                (
                    permission.id,
                    permission.name,
                    permission.description,
                    permission.category.value,
                    permission.created_at,
                    permission.updated_at,
                ),
            )
        except errors.UniqueViolation as e:
            raise DuplicateIdentifier("Permission", permission.id) from e
        return permission

    async def update(self, permission: Permission) -> None:
        """Update permission."""
        await self._conn.execute(
            "UPDATE permission SET name=%s, description=%s, category=%s, updated_at=%s "
            "WHERE id=%s",
            (
                permission.name,
                permission.description,
                permission.category.value,
                permission.updated_at,
                permission.id,
            ),
        )

    async def delete(self, permission_id: str) -> None:
        """Delete permission."""
        await self._conn.execute("DELETE FROM permission WHERE id = %s", (permission_id,))
