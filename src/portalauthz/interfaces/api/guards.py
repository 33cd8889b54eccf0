"""Route guards built on the permission gate."""

import falcon
import falcon.asgi

from portalauthz.application.ports import PermissionChecker
from portalauthz.domain.exceptions import PermissionDenied

ROLES_READ = "roles:read"
ROLES_MANAGE = "roles:manage"
PERMISSIONS_READ = "permissions:read"
PERMISSIONS_MANAGE = "permissions:manage"
ASSIGNMENTS_READ = "assignments:read"
ASSIGNMENTS_MANAGE = "assignments:manage"
AUDIT_READ = "audit:read"

SCOPE_HEADERS = {"department": "X-Department"}


def request_user(req: falcon.asgi.Request):
    """Authenticated user or 401."""
    user = getattr(req.context, "user", None)
    if not user:
        raise falcon.HTTPUnauthorized(title="Unauthorized")
    return user


def request_scope(req: falcon.asgi.Request) -> dict[str, str] | None:
    """Scope the caller is acting in.

    Scope headers win; without one the department claim of the caller's
    token is used, so a department-scoped grant is checked against the
    caller's own department instead of matching everywhere.
    """
    scope = {
        key: value.strip()
        for key, header in SCOPE_HEADERS.items()
        if (value := req.get_header(header))
    }
    user = getattr(req.context, "user", None)
    department = getattr(user, "department", None)
    if "department" not in scope and department:
        scope["department"] = department
    return scope or None


def require_permission(permission_id: str):
    """Falcon ``before`` hook: 401 without a user, 403 unless the gate grants.

    The resource must expose the gate as ``gate``. The handler never runs on
    a denial, and every denial is written to the audit log.
    """

    async def hook(req: falcon.asgi.Request, resp: falcon.asgi.Response, resource, params) -> None:
        user = request_user(req)
        gate: PermissionChecker = resource.gate
        result = await gate.check(user.user_id, permission_id, request_scope(req))
        if not result.granted:
            await gate.record_denial(
                user.user_id, permission_id, result.reason, method=req.method, path=req.path
            )
            raise PermissionDenied(permission_id, result.reason)
        req.context.authorization = result

    return hook


def require_self_or_permission(permission_id: str):
    """Like ``require_permission`` but a user may always act on their own ``user_id``."""
    guard = require_permission(permission_id)

    async def hook(req: falcon.asgi.Request, resp: falcon.asgi.Response, resource, params) -> None:
        user = request_user(req)
        if params.get("user_id") == user.user_id:
            return
        await guard(req, resp, resource, params)

    return hook
