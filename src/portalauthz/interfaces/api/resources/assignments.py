"""Role assignment API resources."""

from datetime import timedelta

import falcon
import falcon.asgi

from portalauthz.application.dto.assignment_dto import AssignmentPatch, AssignmentRequest
from portalauthz.application.use_cases.assignment.assign_role import AssignRoleUseCase
from portalauthz.application.use_cases.assignment.bulk_assign_roles import (
    BulkAssignRolesUseCase,
)
from portalauthz.application.use_cases.assignment.list_assignments import (
    ListExpiringAssignmentsUseCase,
    ListUserAssignmentsUseCase,
)
from portalauthz.application.use_cases.assignment.remove_assignment import (
    RemoveAssignmentUseCase,
)
from portalauthz.application.use_cases.assignment.update_assignment import (
    UpdateAssignmentUseCase,
)
from portalauthz.domain.exceptions import ValidationError
from portalauthz.infrastructure.permission.permission_gate import PermissionGate
from portalauthz.interfaces.api.guards import (
    ASSIGNMENTS_MANAGE,
    ASSIGNMENTS_READ,
    request_user,
    require_permission,
)
from portalauthz.interfaces.api.resources.serializers import (
    assignment_to_dict,
    parse_datetime,
    parse_uuid,
    read_body,
    string_list,
    string_map,
)


def _assignment_request(item: object, user_id: str | None = None) -> AssignmentRequest:
    if not isinstance(item, dict):
        raise ValidationError("Each assignment must be a JSON object")
    return AssignmentRequest(
        user_id=user_id if user_id is not None else str(item.get("user_id") or ""),
        role_ids=[parse_uuid(r, "role_ids") for r in string_list(item, "role_ids") or []],
        expires_at=parse_datetime(item.get("expires_at"), "expires_at"),
        scope=string_map(item, "scope"),
        notes=item.get("notes"),
    )


class UserAssignmentsResource:
    """GET/POST /v1/users/{user_id}/assignments."""

    def __init__(
        self,
        gate: PermissionGate,
        list_user_assignments: ListUserAssignmentsUseCase,
        assign_role: AssignRoleUseCase,
    ) -> None:
        self.gate = gate
        self._list = list_user_assignments
        self._assign = assign_role

    @falcon.before(require_permission(ASSIGNMENTS_READ))
    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, user_id: str
    ) -> None:
        items = await self._list.execute(
            user_id,
            include_inactive=req.get_param_as_bool("include_inactive") or False,
        )
        resp.media = {"items": [assignment_to_dict(a) for a in items]}
        resp.status = falcon.HTTP_200

    @falcon.before(require_permission(ASSIGNMENTS_MANAGE))
    async def on_post(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, user_id: str
    ) -> None:
        """Assign one or more roles in a single all-or-nothing transaction."""
        user = request_user(req)
        request = _assignment_request(await read_body(req), user_id=user_id)
        created = await self._assign.execute(
            request.user_id,
            request.role_ids,
            user.user_id,
            expires_at=request.expires_at,
            scope=request.scope,
            notes=request.notes,
        )
        resp.media = {"items": [assignment_to_dict(a) for a in created]}
        resp.status = falcon.HTTP_201


class BulkAssignmentsResource:
    """POST /v1/assignments/bulk - assign roles to many users at once."""

    def __init__(self, gate: PermissionGate, bulk_assign: BulkAssignRolesUseCase) -> None:
        self.gate = gate
        self._bulk = bulk_assign

    @falcon.before(require_permission(ASSIGNMENTS_MANAGE))
    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        user = request_user(req)
        body = await read_body(req)
        items = body.get("assignments")
        if not isinstance(items, list) or not items:
            raise ValidationError({"assignments": "Must be a non-empty list"})
        requests = [_assignment_request(item) for item in items]
        created = await self._bulk.execute(requests, user.user_id)
        resp.media = {"items": [assignment_to_dict(a) for a in created]}
        resp.status = falcon.HTTP_201


class AssignmentResource:
    """PATCH/DELETE /v1/assignments/{assignment_id}."""

    def __init__(
        self,
        gate: PermissionGate,
        update_assignment: UpdateAssignmentUseCase,
        remove_assignment: RemoveAssignmentUseCase,
    ) -> None:
        self.gate = gate
        self._update = update_assignment
        self._remove = remove_assignment

    @falcon.before(require_permission(ASSIGNMENTS_MANAGE))
    async def on_patch(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, assignment_id: str
    ) -> None:
        """Explicit ``null`` clears ``expires_at`` or ``scope``."""
        user = request_user(req)
        body = await read_body(req)
        is_active = body.get("is_active")
        if is_active is not None and not isinstance(is_active, bool):
            raise ValidationError({"is_active": "Must be a boolean"})
        patch = AssignmentPatch(
            expires_at=parse_datetime(body.get("expires_at"), "expires_at"),
            scope=string_map(body, "scope"),
            is_active=is_active,
            clear_expiry="expires_at" in body and body["expires_at"] is None,
            clear_scope="scope" in body and body["scope"] is None,
        )
        updated = await self._update.execute(
            user.user_id, parse_uuid(assignment_id, "assignment_id"), patch
        )
        resp.media = assignment_to_dict(updated)
        resp.status = falcon.HTTP_200

    @falcon.before(require_permission(ASSIGNMENTS_MANAGE))
    async def on_delete(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, assignment_id: str
    ) -> None:
        """Logical removal; the record stays for history."""
        user = request_user(req)
        removed = await self._remove.execute(
            user.user_id, parse_uuid(assignment_id, "assignment_id")
        )
        resp.media = assignment_to_dict(removed)
        resp.status = falcon.HTTP_200


class ExpiringAssignmentsResource:
    """GET /v1/assignments/expiring?days=30 - assignments about to lapse."""

    def __init__(
        self, gate: PermissionGate, list_expiring: ListExpiringAssignmentsUseCase
    ) -> None:
        self.gate = gate
        self._list = list_expiring

    @falcon.before(require_permission(ASSIGNMENTS_READ))
    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        days = req.get_param_as_int("days", min_value=1, max_value=366) or 30
        items = await self._list.execute(within=timedelta(days=days))
        resp.media = {"items": [assignment_to_dict(a) for a in items]}
        resp.status = falcon.HTTP_200
