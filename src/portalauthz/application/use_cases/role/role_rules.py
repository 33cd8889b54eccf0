"""Field validation shared by role create and update."""

from portalauthz.application.ports import UnitOfWork
from portalauthz.application.use_cases.validation import parse_choice, validate_level
from portalauthz.domain.value_objects import RoleCategory

DEFAULT_MIN_LEVEL = 1
DEFAULT_MAX_LEVEL = 10


async def check_permission_ids(
    uow: UnitOfWork, permission_ids: list[str], errors: dict[str, str]
) -> list[str]:
    """Dedupe preserving order; report ids missing from the catalog."""
    ids = list(dict.fromkeys(p.strip() for p in permission_ids))
    if not ids:
        return ids
    known = {p.id for p in await uow.permissions.get_many(ids)}
    missing = [p for p in ids if p not in known]
    if missing:
        errors["permission_ids"] = f"Unknown permission(s): {', '.join(missing)}"
    return ids


async def validate_role_fields(
    uow: UnitOfWork,
    fields: dict[str, object],
    *,
    min_level: int,
    max_level: int,
) -> tuple[dict[str, object], dict[str, str]]:
    """Validate every provided field; return cleaned values and all errors."""
    errors: dict[str, str] = {}
    cleaned: dict[str, object] = {}

    if "name" in fields:
        name = str(fields["name"] or "").strip()
        if not name:
            errors["name"] = "Name is required"
        elif len(name) > 100:
            errors["name"] = "Name must be at most 100 characters"
        cleaned["name"] = name
    if "description" in fields:
        description = str(fields["description"] or "").strip()
        if len(description) > 500:
            errors["description"] = "Description must be at most 500 characters"
        cleaned["description"] = description
    if "category" in fields:
        cleaned["category"] = parse_choice(RoleCategory, fields["category"], "category", errors)
    if "level" in fields:
        cleaned["level"] = validate_level(fields["level"], min_level, max_level, errors)
    if "permission_ids" in fields:
        cleaned["permission_ids"] = await check_permission_ids(
            uow, list(fields["permission_ids"] or []), errors
        )
    if "is_active" in fields:
        cleaned["is_active"] = bool(fields["is_active"])
    return cleaned, errors
