"""Permission catalog API resources."""

import falcon
import falcon.asgi

from portalauthz.application.dto.role_dto import PermissionCreateInput, PermissionPatch
from portalauthz.application.use_cases.catalog.create_permission import CreatePermissionUseCase
from portalauthz.application.use_cases.catalog.delete_permission import DeletePermissionUseCase
from portalauthz.application.use_cases.catalog.list_permissions import (
    GetPermissionUseCase,
    ListPermissionCategoriesUseCase,
    ListPermissionsUseCase,
)
from portalauthz.application.use_cases.catalog.update_permission import UpdatePermissionUseCase
from portalauthz.infrastructure.permission.permission_gate import PermissionGate
from portalauthz.interfaces.api.guards import (
    PERMISSIONS_MANAGE,
    PERMISSIONS_READ,
    request_user,
    require_permission,
)
from portalauthz.interfaces.api.resources.serializers import permission_to_dict, read_body


class PermissionsResource:
    """GET/POST /v1/permissions - list and register catalog permissions."""

    def __init__(
        self,
        gate: PermissionGate,
        list_permissions: ListPermissionsUseCase,
        create_permission: CreatePermissionUseCase,
    ) -> None:
        self.gate = gate
        self._list = list_permissions
        self._create = create_permission

    @falcon.before(require_permission(PERMISSIONS_READ))
    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        items = await self._list.execute(
            category=req.get_param("category"),
            search=req.get_param("search"),
        )
        resp.media = {"items": [permission_to_dict(p) for p in items]}
        resp.status = falcon.HTTP_200

    @falcon.before(require_permission(PERMISSIONS_MANAGE))
    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        user = request_user(req)
        body = await read_body(req)
        data = PermissionCreateInput(
            id=str(body.get("id") or ""),
            name=str(body.get("name") or ""),
            category=str(body.get("category") or ""),
            description=str(body.get("description") or ""),
        )
        permission = await self._create.execute(user.user_id, data)
        resp.media = permission_to_dict(permission)
        resp.status = falcon.HTTP_201


class PermissionCategoriesResource:
    """GET /v1/permissions/categories - categories with their catalog size."""

    def __init__(
        self, gate: PermissionGate, list_categories: ListPermissionCategoriesUseCase
    ) -> None:
        self.gate = gate
        self._list = list_categories

    @falcon.before(require_permission(PERMISSIONS_READ))
    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        categories = await self._list.execute()
        resp.media = {
            "items": [
                {"category": category.value, "permissions": count}
                for category, count in categories
            ]
        }
        resp.status = falcon.HTTP_200


class PermissionResource:
    """GET/PATCH/DELETE /v1/permissions/{permission_id}."""

    def __init__(
        self,
        gate: PermissionGate,
        get_permission: GetPermissionUseCase,
        update_permission: UpdatePermissionUseCase,
        delete_permission: DeletePermissionUseCase,
    ) -> None:
        self.gate = gate
        self._get = get_permission
        self._update = update_permission
        self._delete = delete_permission

    @falcon.before(require_permission(PERMISSIONS_READ))
    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, permission_id: str
    ) -> None:
        resp.media = permission_to_dict(await self._get.execute(permission_id))
        resp.status = falcon.HTTP_200

    @falcon.before(require_permission(PERMISSIONS_MANAGE))
    async def on_patch(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, permission_id: str
    ) -> None:
        user = request_user(req)
        body = await read_body(req)
        patch = PermissionPatch(
            name=body.get("name"),
            description=body.get("description"),
            category=body.get("category"),
        )
        permission = await self._update.execute(user.user_id, permission_id, patch)
        resp.media = permission_to_dict(permission)
        resp.status = falcon.HTTP_200

    @falcon.before(require_permission(PERMISSIONS_MANAGE))
    async def on_delete(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, permission_id: str
    ) -> None:
        user = request_user(req)
        await self._delete.execute(user.user_id, permission_id)
        resp.status = falcon.HTTP_204
