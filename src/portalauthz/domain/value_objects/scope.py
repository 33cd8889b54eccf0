"""Assignment scope matching."""

from collections.abc import Mapping

Scope = Mapping[str, str]


def scope_matches(assignment_scope: Scope | None, context: Scope | None) -> bool:
    """Check an assignment's scope against the caller's context.

    Unscoped assignments and empty contexts always match. Otherwise every key
    present in both must be equal (exact string match, no hierarchy).
    """
    if not assignment_scope or not context:
        return True
    for key, value in assignment_scope.items():
        if key in context and context[key] != value:
            return False
    return True


def normalize_scope(scope: Mapping[str, object] | None) -> dict[str, str] | None:
    """Strip keys and values, drop empty entries; ``None`` when nothing remains."""
    if not scope:
        return None
    cleaned = {
        str(k).strip(): str(v).strip()
        for k, v in scope.items()
        if str(k).strip() and v is not None and str(v).strip()
    }
    return cleaned or None
