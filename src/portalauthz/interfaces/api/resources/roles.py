"""Role registry API resources."""

import falcon
import falcon.asgi

from portalauthz.application.dto.role_dto import RoleCreateInput, RolePatch
from portalauthz.application.use_cases.assignment.list_assignments import (
    ListRoleAssignmentsUseCase,
)
from portalauthz.application.use_cases.role.clone_role import CloneRoleUseCase
from portalauthz.application.use_cases.role.create_role import CreateRoleUseCase
from portalauthz.application.use_cases.role.delete_role import DeleteRoleUseCase
from portalauthz.application.use_cases.role.list_roles import GetRoleUseCase, ListRolesUseCase
from portalauthz.application.use_cases.role.role_analytics import GetRoleAnalyticsUseCase
from portalauthz.application.use_cases.role.toggle_category_permissions import (
    ToggleCategoryPermissionsUseCase,
)
from portalauthz.application.use_cases.role.update_role import UpdateRoleUseCase
from portalauthz.infrastructure.permission.permission_gate import PermissionGate
from portalauthz.interfaces.api.guards import (
    ASSIGNMENTS_READ,
    ROLES_MANAGE,
    ROLES_READ,
    request_user,
    require_permission,
)
from portalauthz.interfaces.api.resources.serializers import (
    analytics_to_dict,
    assignment_to_dict,
    parse_datetime,
    parse_uuid,
    read_body,
    role_to_dict,
    string_list,
)


class RolesResource:
    """GET/POST /v1/roles - list and create roles."""

    def __init__(
        self,
        gate: PermissionGate,
        list_roles: ListRolesUseCase,
        create_role: CreateRoleUseCase,
    ) -> None:
        self.gate = gate
        self._list = list_roles
        self._create = create_role

    @falcon.before(require_permission(ROLES_READ))
    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """List roles, highest level first."""
        roles = await self._list.execute(
            category=req.get_param("category"),
            active_only=req.get_param_as_bool("active_only") or False,
        )
        resp.media = {"items": [role_to_dict(r) for r in roles]}
        resp.status = falcon.HTTP_200

    @falcon.before(require_permission(ROLES_MANAGE))
    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Create a custom role."""
        user = request_user(req)
        body = await read_body(req)
        data = RoleCreateInput(
            name=body.get("name") or "",
            category=body.get("category") or "",
            level=body.get("level"),
            description=body.get("description") or "",
            permission_ids=string_list(body, "permission_ids"),
            is_active=bool(body.get("is_active", True)),
        )
        role = await self._create.execute(user.user_id, data)
        resp.media = role_to_dict(role)
        resp.status = falcon.HTTP_201


class RoleResource:
    """GET/PATCH/DELETE /v1/roles/{role_id}."""

    def __init__(
        self,
        gate: PermissionGate,
        get_role: GetRoleUseCase,
        update_role: UpdateRoleUseCase,
        delete_role: DeleteRoleUseCase,
    ) -> None:
        self.gate = gate
        self._get = get_role
        self._update = update_role
        self._delete = delete_role

    @falcon.before(require_permission(ROLES_READ))
    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: str
    ) -> None:
        role = await self._get.execute(parse_uuid(role_id, "role_id"))
        resp.media = role_to_dict(role)
        resp.status = falcon.HTTP_200

    @falcon.before(require_permission(ROLES_MANAGE))
    async def on_patch(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: str
    ) -> None:
        """Partial update. Only ``is_active`` may change on a system role."""
        user = request_user(req)
        body = await read_body(req)
        patch = RolePatch(
            name=body.get("name"),
            description=body.get("description"),
            category=body.get("category"),
            level=body.get("level"),
            permission_ids=string_list(body, "permission_ids"),
            is_active=body.get("is_active"),
        )
        role = await self._update.execute(user.user_id, parse_uuid(role_id, "role_id"), patch)
        resp.media = role_to_dict(role)
        resp.status = falcon.HTTP_200

    @falcon.before(require_permission(ROLES_MANAGE))
    async def on_delete(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: str
    ) -> None:
        user = request_user(req)
        await self._delete.execute(user.user_id, parse_uuid(role_id, "role_id"))
        resp.status = falcon.HTTP_204


class RoleCloneResource:
    """POST /v1/roles/{role_id}/clone - copy a role under a new name."""

    def __init__(self, gate: PermissionGate, clone_role: CloneRoleUseCase) -> None:
        self.gate = gate
        self._clone = clone_role

    @falcon.before(require_permission(ROLES_MANAGE))
    async def on_post(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: str
    ) -> None:
        user = request_user(req)
        body = await read_body(req)
        role = await self._clone.execute(
            user.user_id, parse_uuid(role_id, "role_id"), str(body.get("name") or "")
        )
        resp.media = role_to_dict(role)
        resp.status = falcon.HTTP_201


class RoleCategoryResource:
    """PUT/DELETE /v1/roles/{role_id}/categories/{category}.

    PUT selects every catalog permission of the category, DELETE deselects them.
    """

    def __init__(
        self, gate: PermissionGate, toggle_category: ToggleCategoryPermissionsUseCase
    ) -> None:
        self.gate = gate
        self._toggle = toggle_category

    async def _apply(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        role_id: str,
        category: str,
        select: bool,
    ) -> None:
        user = request_user(req)
        role = await self._toggle.execute(
            user.user_id, parse_uuid(role_id, "role_id"), category, select
        )
        resp.media = role_to_dict(role)
        resp.status = falcon.HTTP_200

    @falcon.before(require_permission(ROLES_MANAGE))
    async def on_put(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: str, category: str
    ) -> None:
        await self._apply(req, resp, role_id, category, select=True)

    @falcon.before(require_permission(ROLES_MANAGE))
    async def on_delete(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: str, category: str
    ) -> None:
        await self._apply(req, resp, role_id, category, select=False)


class RoleAssignmentsResource:
    """GET /v1/roles/{role_id}/assignments - who holds a role."""

    def __init__(
        self, gate: PermissionGate, list_role_assignments: ListRoleAssignmentsUseCase
    ) -> None:
        self.gate = gate
        self._list = list_role_assignments

    @falcon.before(require_permission(ASSIGNMENTS_READ))
    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: str
    ) -> None:
        at = parse_datetime(req.get_param("at"), "at")
        items = await self._list.execute(
            parse_uuid(role_id, "role_id"),
            include_inactive=req.get_param_as_bool("include_inactive") or False,
            in_effect_at=at,
        )
        resp.media = {"items": [assignment_to_dict(a, at) for a in items]}
        resp.status = falcon.HTTP_200


class RoleAnalyticsResource:
    """GET /v1/roles/analytics - dashboard figures for the role registry."""

    def __init__(self, gate: PermissionGate, analytics: GetRoleAnalyticsUseCase) -> None:
        self.gate = gate
        self._analytics = analytics

    @falcon.before(require_permission(ROLES_READ))
    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        resp.media = analytics_to_dict(await self._analytics.execute())
        resp.status = falcon.HTTP_200
