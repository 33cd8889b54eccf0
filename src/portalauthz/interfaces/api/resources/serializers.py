"""JSON shapes of RBAC records and request parsing helpers."""

from datetime import UTC, datetime
from uuid import UUID

from portalauthz.application.dto.authorization_dto import (
    CheckResult,
    EffectivePermissionSet,
    PermissionSummary,
)
from portalauthz.application.use_cases.role.role_analytics import RoleAnalytics
from portalauthz.domain.entities import AuditEntry, Permission, Role, RoleAssignment
from portalauthz.domain.exceptions import ValidationError


def parse_uuid(value: object, field: str) -> UUID:
    try:
        return UUID(str(value))
    except (TypeError, ValueError) as e:
        raise ValidationError({field: f"Invalid UUID: {value!r}"}) from e


def parse_datetime(value: object, field: str) -> datetime | None:
    """ISO 8601 string or None; naive values are read as UTC."""
    if value in (None, ""):
        return None
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError as e:
        raise ValidationError({field: f"Invalid ISO 8601 datetime: {value!r}"}) from e
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)


def permission_to_dict(p: Permission) -> dict:
    return {
        "id": p.id,
        "name": p.name,
        "description": p.description,
        "category": p.category.value,
        "created_at": p.created_at.isoformat(),
        "updated_at": p.updated_at.isoformat(),
    }


def role_to_dict(r: Role) -> dict:
    return {
        "id": str(r.id),
        "name": r.name,
        "description": r.description,
        "category": r.category.value,
        "level": r.level,
        "is_active": r.is_active,
        "is_system_role": r.is_system_role,
        "permission_ids": list(r.permission_ids),
        "version": r.version,
        "created_by": r.created_by,
        "created_at": r.created_at.isoformat(),
        "updated_at": r.updated_at.isoformat(),
    }


def assignment_to_dict(a: RoleAssignment, at: datetime | None = None) -> dict:
    return {
        "id": str(a.id),
        "user_id": a.user_id,
        "role_id": str(a.role_id),
        "assigned_by": a.assigned_by,
        "assigned_at": a.assigned_at.isoformat(),
        "expires_at": a.expires_at.isoformat() if a.expires_at else None,
        "scope": a.scope,
        "is_active": a.is_active,
        "deactivated_at": a.deactivated_at.isoformat() if a.deactivated_at else None,
        "status": a.status_at(at or datetime.now(UTC)).value,
        "reason": a.reason.value,
        "notes": a.notes,
    }


def audit_to_dict(e: AuditEntry) -> dict:
    return {
        "id": str(e.id),
        "actor": e.actor,
        "action": e.action.value,
        "target_type": e.target_type,
        "target_id": e.target_id,
        "subject": e.subject,
        "timestamp": e.timestamp.isoformat(),
        "transaction_id": str(e.transaction_id),
        "before": e.before,
        "after": e.after,
    }


def permission_set_to_dict(s: EffectivePermissionSet) -> dict:
    return {
        "user_id": s.user_id,
        "evaluated_at": s.evaluated_at.isoformat(),
        "valid_until": s.valid_until.isoformat() if s.valid_until else None,
        "permissions": sorted(s.permission_ids),
        "grants": [
            {
                "role_id": str(g.role.id),
                "role": g.role.name,
                "assignment_id": str(g.assignment.id),
                "scope": g.assignment.scope,
                "expires_at": (
                    g.assignment.expires_at.isoformat() if g.assignment.expires_at else None
                ),
            }
            for g in s.grants
        ],
    }


def check_result_to_dict(r: CheckResult) -> dict:
    return {"granted": r.granted, "reason": r.reason, "roles": r.roles}


def summary_to_dict(s: PermissionSummary) -> dict:
    return {
        "user_id": s.user_id,
        "evaluated_at": s.evaluated_at.isoformat(),
        "valid_until": s.valid_until.isoformat() if s.valid_until else None,
        "total_roles": s.total_roles,
        "total_permissions": s.total_permissions,
        "highest_role_level": s.highest_role_level,
        "is_admin": s.is_admin,
        "role_names": s.role_names,
        "permissions_by_category": s.permissions_by_category,
    }


def analytics_to_dict(a: RoleAnalytics) -> dict:
    return {
        "total_roles": a.total_roles,
        "active_roles": a.active_roles,
        "system_roles": a.system_roles,
        "custom_roles": a.custom_roles,
        "roles_by_category": a.roles_by_category,
        "most_used": [
            {"role_id": str(role.id), "name": role.name, "assignments": count}
            for role, count in a.most_used
        ],
        "recent_assignments": a.recent_assignments,
        "expiring_assignments": a.expiring_assignments,
    }


async def read_body(req) -> dict:
    """JSON object body of the request, or ValidationError."""
    body = await req.get_media(default_when_empty={})
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


def string_list(body: dict, field: str) -> list[str] | None:
    """Optional list-of-strings field of a request body."""
    value = body.get(field)
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValidationError({field: "Must be a list of strings"})
    return value


def string_map(body: dict, field: str) -> dict[str, str] | None:
    """Optional string-to-string object field of a request body (e.g. a scope)."""
    value = body.get(field)
    if value is None:
        return None
    if not isinstance(value, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in value.items()
    ):
        raise ValidationError({field: "Must be an object of string values"})
    return value
