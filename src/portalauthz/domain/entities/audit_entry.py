"""Audit entry entity - append-only record of an RBAC mutation."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import UUID

from portalauthz.domain.value_objects import AuditAction


@dataclass(frozen=True)
class AuditEntry:
    """Who changed what, with before/after snapshots.

    Entries written by one atomic operation share ``transaction_id``.
    """

    id: UUID
    actor: str
    action: AuditAction
    target_type: str
    target_id: str
    timestamp: datetime
    transaction_id: UUID
    before: dict[str, Any] | None = None
    after: dict[str, Any] | None = None
    subject: str | None = None
