"""Audit log repository port."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from portalauthz.domain.entities import AuditEntry
from portalauthz.domain.value_objects import AuditAction


class AuditRepository(Protocol):
    """Port for the append-only audit log. No update or delete."""

    async def append(self, entries: list[AuditEntry]) -> None: ...

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
    ) -> list[AuditEntry]: ...
