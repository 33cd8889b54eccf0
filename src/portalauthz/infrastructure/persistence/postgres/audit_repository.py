"""PostgreSQL audit log repository implementation."""

from __future__ import annotations

from datetime import datetime

from psycopg import AsyncConnection
from psycopg.types.json import Jsonb

from portalauthz.domain.entities import AuditEntry
from portalauthz.domain.value_objects import AuditAction

_COLUMNS = (
    "id, actor, action, target_type, target_id, timestamp, transaction_id, "
    "before, after, subject"
)


def _row_to_entry(r: tuple) -> AuditEntry:
    return AuditEntry(
        id=r[0],
        actor=r[1],
        action=AuditAction(r[2]),
        target_type=r[3],
        target_id=r[4],
        timestamp=r[5],
        transaction_id=r[6],
        before=r[7],
        after=r[8],
        subject=r[9],
    )


class PostgresAuditRepository:
    """Append-only audit log. Exposes no update or delete."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def append(self, entries: list[AuditEntry]) -> None:
        """Insert entries."""
        if not entries:
            return
        async with self._conn.cursor() as cur:
            await cur.executemany(
                f"INSERT INTO audit_log ({_COLUMNS}) "
                "VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)",
                [
                    (
                        e.id,
                        e.actor,
                        e.action.value,
                        e.target_type,
                        e.target_id,
                        e.timestamp,
                        e.transaction_id,
                        Jsonb(e.before) if e.before is not None else None,
                        Jsonb(e.after) if e.after is not None else None,
                        e.subject,
                    )
                    for e in entries
                ],
            )

    async def list(
        self,
        *,
        actor: str | None = None,
        subject: str | None = None,
        target_id: str | None = None,
        actions: list[AuditAction] | None = None,
        since: datetime | None = None,
        until: datetime | None = None,
        limit: int = 100,
    ) -> list[AuditEntry]:
        """List entries newest first."""
        conditions = []
        params: list[object] = []
        if actor:
            conditions.append("actor = %s")
            params.append(actor)
        if subject:
            conditions.append("subject = %s")
            params.append(subject)
        if target_id:
            conditions.append("target_id = %s")
            params.append(target_id)
        if actions:
            conditions.append("action = ANY(%s)")
            params.append([a.value for a in actions])
        if since:
            conditions.append("timestamp >= %s")
            params.append(since)
        if until:
            conditions.append("timestamp <= %s")
            params.append(until)
        where = (" WHERE " + " AND ".join(conditions)) if conditions else ""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM audit_log{where} ORDER BY timestamp DESC, id LIMIT %s",
            (*params, limit),
        )
        return [_row_to_entry(r) for r in await cur.fetchall()]
