"""Audit log API resources."""

import falcon
import falcon.asgi

from portalauthz.application.use_cases.audit.list_audit_entries import ListAuditEntriesUseCase
from portalauthz.infrastructure.permission.permission_gate import PermissionGate
from portalauthz.interfaces.api.guards import (
    AUDIT_READ,
    require_permission,
    require_self_or_permission,
)
from portalauthz.interfaces.api.resources.serializers import audit_to_dict, parse_datetime


class AuditResource:
    """GET /v1/audit - filtered audit trail, newest first."""

    def __init__(self, gate: PermissionGate, list_audit: ListAuditEntriesUseCase) -> None:
        self.gate = gate
        self._list = list_audit

    @falcon.before(require_permission(AUDIT_READ))
    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        entries = await self._list.execute(
            actor=req.get_param("actor"),
            subject=req.get_param("subject"),
            target_id=req.get_param("target_id"),
            actions=req.get_param_as_list("action"),
            since=parse_datetime(req.get_param("since"), "since"),
            until=parse_datetime(req.get_param("until"), "until"),
            limit=req.get_param_as_int("limit") or 100,
        )
        resp.media = {"items": [audit_to_dict(e) for e in entries]}
        resp.status = falcon.HTTP_200


class UserRoleHistoryResource:
    """GET /v1/users/{user_id}/history - assignment events of one user."""

    def __init__(self, gate: PermissionGate, list_audit: ListAuditEntriesUseCase) -> None:
        self.gate = gate
        self._list = list_audit

    @falcon.before(require_self_or_permission(AUDIT_READ))
    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, user_id: str
    ) -> None:
        limit = req.get_param_as_int("limit") or 100
        entries = await self._list.role_history(user_id, limit=min(max(limit, 1), 500))
        resp.media = {"items": [audit_to_dict(e) for e in entries]}
        resp.status = falcon.HTTP_200
