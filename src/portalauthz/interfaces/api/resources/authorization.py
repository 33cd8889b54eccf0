"""Effective permission and permission check API resources."""

import falcon
import falcon.asgi

from portalauthz.application.use_cases.authorization.resolve_effective_permissions import (
    ResolveEffectivePermissionsUseCase,
)
from portalauthz.application.use_cases.authorization.summarize_user_permissions import (
    SummarizeUserPermissionsUseCase,
)
from portalauthz.domain.exceptions import ValidationError
from portalauthz.infrastructure.permission.permission_gate import PermissionGate
from portalauthz.interfaces.api.guards import ASSIGNMENTS_READ, require_self_or_permission
from portalauthz.interfaces.api.resources.serializers import (
    check_result_to_dict,
    parse_datetime,
    permission_set_to_dict,
    read_body,
    string_list,
    string_map,
    summary_to_dict,
)


class UserPermissionsResource:
    """GET /v1/users/{user_id}/permissions[?at=ISO8601].

    Without ``at`` the set comes through the gate (and its cache); with ``at``
    it is resolved directly for that instant, e.g. to audit a past decision.
    """

    def __init__(
        self, gate: PermissionGate, resolver: ResolveEffectivePermissionsUseCase
    ) -> None:
        self.gate = gate
        self._resolver = resolver

    @falcon.before(require_self_or_permission(ASSIGNMENTS_READ))
    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, user_id: str
    ) -> None:
        at = parse_datetime(req.get_param("at"), "at")
        if at is None:
            permissions = await self.gate.effective_permissions(user_id)
        else:
            permissions = await self._resolver.execute(user_id, at=at)
        resp.media = permission_set_to_dict(permissions)
        resp.status = falcon.HTTP_200


class UserPermissionSummaryResource:
    """GET /v1/users/{user_id}/permissions/summary[?at=ISO8601]."""

    def __init__(self, gate: PermissionGate, summarize: SummarizeUserPermissionsUseCase) -> None:
        self.gate = gate
        self._summarize = summarize

    @falcon.before(require_self_or_permission(ASSIGNMENTS_READ))
    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, user_id: str
    ) -> None:
        at = parse_datetime(req.get_param("at"), "at")
        summary = await self._summarize.execute(user_id, at=at)
        resp.media = summary_to_dict(summary)
        resp.status = falcon.HTTP_200


class PermissionCheckResource:
    """POST /v1/users/{user_id}/permissions/check.

    Body: ``{"permission": "grades:edit"}`` or
    ``{"permissions": [...], "mode": "any" | "all"}``, with an optional
    ``context`` scope. A denial is a normal 200 answer with ``granted: false``.
    """

    def __init__(self, gate: PermissionGate) -> None:
        self.gate = gate

    @falcon.before(require_self_or_permission(ASSIGNMENTS_READ))
    async def on_post(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, user_id: str
    ) -> None:
        body = await read_body(req)
        context = string_map(body, "context")
        permission = body.get("permission")
        permissions = string_list(body, "permissions")

        if isinstance(permission, str) and permission:
            result = await self.gate.check(user_id, permission, context)
        elif permissions:
            mode = body.get("mode", "any")
            if mode == "any":
                result = await self.gate.check_any(user_id, permissions, context)
            elif mode == "all":
                result = await self.gate.check_all(user_id, permissions, context)
            else:
                raise ValidationError({"mode": "Expected 'any' or 'all'"})
        else:
            raise ValidationError(
                {"permission": "A permission or a list of permissions is required"}
            )

        resp.media = check_result_to_dict(result)
        resp.status = falcon.HTTP_200
