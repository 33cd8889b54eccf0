"""Falcon ASGI application wiring - use cases, gate, routes and error handlers."""

from collections.abc import Callable
from datetime import datetime

import falcon.asgi

from portalauthz.application.ports import PermissionCache
from portalauthz.application.use_cases.assignment.assign_role import AssignRoleUseCase
from portalauthz.application.use_cases.assignment.bulk_assign_roles import (
    BulkAssignRolesUseCase,
)
from portalauthz.application.use_cases.assignment.list_assignments import (
    ListExpiringAssignmentsUseCase,
    ListRoleAssignmentsUseCase,
    ListUserAssignmentsUseCase,
)
from portalauthz.application.use_cases.assignment.remove_assignment import (
    RemoveAssignmentUseCase,
)
from portalauthz.application.use_cases.assignment.update_assignment import (
    UpdateAssignmentUseCase,
)
from portalauthz.application.use_cases.audit.list_audit_entries import ListAuditEntriesUseCase
from portalauthz.application.use_cases.audit.record_access_denied import (
    RecordAccessDeniedUseCase,
)
from portalauthz.application.use_cases.authorization.resolve_effective_permissions import (
    ResolveEffectivePermissionsUseCase,
)
from portalauthz.application.use_cases.authorization.summarize_user_permissions import (
    SummarizeUserPermissionsUseCase,
)
from portalauthz.application.use_cases.catalog.create_permission import CreatePermissionUseCase
from portalauthz.application.use_cases.catalog.delete_permission import DeletePermissionUseCase
from portalauthz.application.use_cases.catalog.list_permissions import (
    GetPermissionUseCase,
    ListPermissionCategoriesUseCase,
    ListPermissionsUseCase,
)
from portalauthz.application.use_cases.catalog.update_permission import UpdatePermissionUseCase
from portalauthz.application.use_cases.role.clone_role import CloneRoleUseCase
from portalauthz.application.use_cases.role.create_role import CreateRoleUseCase
from portalauthz.application.use_cases.role.delete_role import DeleteRoleUseCase
from portalauthz.application.use_cases.role.list_roles import GetRoleUseCase, ListRolesUseCase
from portalauthz.application.use_cases.role.role_analytics import GetRoleAnalyticsUseCase
from portalauthz.application.use_cases.role.role_rules import (
    DEFAULT_MAX_LEVEL,
    DEFAULT_MIN_LEVEL,
)
from portalauthz.application.use_cases.role.toggle_category_permissions import (
    ToggleCategoryPermissionsUseCase,
)
from portalauthz.application.use_cases.role.update_role import UpdateRoleUseCase
from portalauthz.domain.exceptions import RBACError
from portalauthz.infrastructure.permission.permission_gate import PermissionGate
from portalauthz.interfaces.api.errors import handle_rbac_error, handle_unexpected_error
from portalauthz.interfaces.api.resources.assignments import (
    AssignmentResource,
    BulkAssignmentsResource,
    ExpiringAssignmentsResource,
    UserAssignmentsResource,
)
from portalauthz.interfaces.api.resources.audit import AuditResource, UserRoleHistoryResource
from portalauthz.interfaces.api.resources.authorization import (
    PermissionCheckResource,
    UserPermissionSummaryResource,
    UserPermissionsResource,
)
from portalauthz.interfaces.api.resources.health import HealthResource
from portalauthz.interfaces.api.resources.permissions import (
    PermissionCategoriesResource,
    PermissionResource,
    PermissionsResource,
)
from portalauthz.interfaces.api.resources.roles import (
    RoleAnalyticsResource,
    RoleAssignmentsResource,
    RoleCategoryResource,
    RoleCloneResource,
    RoleResource,
    RolesResource,
)


def create_api(
    unit_of_work_factory: type,
    *,
    middleware: list | None = None,
    permission_cache: PermissionCache | None = None,
    min_level: int = DEFAULT_MIN_LEVEL,
    max_level: int = DEFAULT_MAX_LEVEL,
    clock: Callable[[], datetime] | None = None,
) -> falcon.asgi.App:
    """Build the Falcon app over a unit of work factory."""
    uow_factory = unit_of_work_factory
    cache = permission_cache

    resolver = ResolveEffectivePermissionsUseCase(uow_factory)
    gate = PermissionGate(
        resolver, cache, clock=clock, denial_log=RecordAccessDeniedUseCase(uow_factory)
    )

    app = falcon.asgi.App(middleware=middleware or [])
    app.add_error_handler(Exception, handle_unexpected_error)
    app.add_error_handler(RBACError, handle_rbac_error)

    health = HealthResource(uow_factory)
    app.add_route("/v1/health", health)
    app.add_route("/v1/health/ready", health, suffix="ready")

    app.add_route(
        "/v1/permissions",
        PermissionsResource(
            gate, ListPermissionsUseCase(uow_factory), CreatePermissionUseCase(uow_factory)
        ),
    )
    app.add_route(
        "/v1/permissions/categories",
        PermissionCategoriesResource(gate, ListPermissionCategoriesUseCase(uow_factory)),
    )
    app.add_route(
        "/v1/permissions/{permission_id}",
        PermissionResource(
            gate,
            GetPermissionUseCase(uow_factory),
            UpdatePermissionUseCase(uow_factory),
            DeletePermissionUseCase(uow_factory),
        ),
    )

    app.add_route(
        "/v1/roles",
        RolesResource(
            gate,
            ListRolesUseCase(uow_factory),
            CreateRoleUseCase(uow_factory, min_level=min_level, max_level=max_level),
        ),
    )
    app.add_route(
        "/v1/roles/analytics", RoleAnalyticsResource(gate, GetRoleAnalyticsUseCase(uow_factory))
    )
    app.add_route(
        "/v1/roles/{role_id}",
        RoleResource(
            gate,
            GetRoleUseCase(uow_factory),
            UpdateRoleUseCase(
                uow_factory, permission_cache=cache, min_level=min_level, max_level=max_level
            ),
            DeleteRoleUseCase(uow_factory),
        ),
    )
    app.add_route(
        "/v1/roles/{role_id}/clone", RoleCloneResource(gate, CloneRoleUseCase(uow_factory))
    )
    app.add_route(
        "/v1/roles/{role_id}/categories/{category}",
        RoleCategoryResource(gate, ToggleCategoryPermissionsUseCase(uow_factory, cache)),
    )
    app.add_route(
        "/v1/roles/{role_id}/assignments",
        RoleAssignmentsResource(gate, ListRoleAssignmentsUseCase(uow_factory)),
    )

    app.add_route(
        "/v1/users/{user_id}/assignments",
        UserAssignmentsResource(
            gate, ListUserAssignmentsUseCase(uow_factory), AssignRoleUseCase(uow_factory, cache)
        ),
    )
    app.add_route(
        "/v1/assignments/bulk",
        BulkAssignmentsResource(gate, BulkAssignRolesUseCase(uow_factory, cache)),
    )
    app.add_route(
        "/v1/assignments/expiring",
        ExpiringAssignmentsResource(gate, ListExpiringAssignmentsUseCase(uow_factory)),
    )
    app.add_route(
        "/v1/assignments/{assignment_id}",
        AssignmentResource(
            gate,
            UpdateAssignmentUseCase(uow_factory, cache),
            RemoveAssignmentUseCase(uow_factory, cache),
        ),
    )

    app.add_route("/v1/users/{user_id}/permissions", UserPermissionsResource(gate, resolver))
    app.add_route("/v1/users/{user_id}/permissions/check", PermissionCheckResource(gate))
    app.add_route(
        "/v1/users/{user_id}/permissions/summary",
        UserPermissionSummaryResource(
            gate, SummarizeUserPermissionsUseCase(uow_factory, resolver)
        ),
    )

    list_audit = ListAuditEntriesUseCase(uow_factory)
    app.add_route("/v1/audit", AuditResource(gate, list_audit))
    app.add_route("/v1/users/{user_id}/history", UserRoleHistoryResource(gate, list_audit))
    return app
