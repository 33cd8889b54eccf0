"""Audit entry construction and JSON-safe snapshots."""

from dataclasses import asdict
from datetime import UTC, datetime
from enum import Enum
from typing import Any
from uuid import UUID, uuid4

from portalauthz.domain.entities import AuditEntry
from portalauthz.domain.value_objects import AuditAction


def _jsonable(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, list | tuple):
        return [_jsonable(v) for v in value]
    return value


def snapshot(entity: Any) -> dict[str, Any]:
    """Dataclass entity -> plain dict suitable for the audit log."""
    return _jsonable(asdict(entity))


def audit_entry(
    actor: str,
    action: AuditAction,
    target_type: str,
    target_id: object,
    *,
    transaction_id: UUID | None = None,
    before: dict[str, Any] | None = None,
    after: dict[str, Any] | None = None,
    subject: str | None = None,
    timestamp: datetime | None = None,
) -> AuditEntry:
    return AuditEntry(
        id=uuid4(),
        actor=actor,
        action=action,
        target_type=target_type,
        target_id=str(target_id),
        timestamp=timestamp or datetime.now(UTC),
        transaction_id=transaction_id or uuid4(),
        before=before,
        after=after,
        subject=subject,
    )
