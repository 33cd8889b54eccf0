"""Unit tests for role registry use cases."""

from datetime import timedelta
from uuid import uuid4

import pytest

from portalauthz.application.dto.role_dto import RoleCreateInput, RolePatch
from portalauthz.application.use_cases.role.clone_role import CloneRoleUseCase
from portalauthz.application.use_cases.role.create_role import CreateRoleUseCase
from portalauthz.application.use_cases.role.delete_role import DeleteRoleUseCase
from portalauthz.application.use_cases.role.list_roles import GetRoleUseCase, ListRolesUseCase
from portalauthz.application.use_cases.role.role_analytics import GetRoleAnalyticsUseCase
from portalauthz.application.use_cases.role.toggle_category_permissions import (
    ToggleCategoryPermissionsUseCase,
)
from portalauthz.application.use_cases.role.update_role import UpdateRoleUseCase
from portalauthz.domain.exceptions import (
    DuplicateIdentifier,
    NotFound,
    ReferentialConflict,
    SystemRoleImmutable,
    ValidationError,
)
from portalauthz.domain.value_objects import AuditAction, PermissionCategory, RoleCategory
from portalauthz.infrastructure.cache.memory_permission_cache import InMemoryPermissionCache

from tests.conftest import T0, make_assignment, make_permission, make_role


# --- CreateRoleUseCase ---


@pytest.mark.asyncio
async def test_create_role_success(store, catalog, uow_factory) -> None:
    use_case = CreateRoleUseCase(uow_factory)

    role = await use_case.execute(
        "admin-1",
        RoleCreateInput(
            name="Exam Officer",
            category="academic",
            level=5,
            permission_ids=["grades:view", "grades:edit", "grades:view"],
        ),
    )

    assert role.permission_ids == ["grades:view", "grades:edit"]
    assert role.is_system_role is False
    assert role.created_by == "admin-1"
    assert store.roles[role.id] == role
    assert store.audit[-1].action is AuditAction.ROLE_CREATED


@pytest.mark.asyncio
async def test_create_role_lists_all_violations(store, catalog, uow_factory) -> None:
    """One ValidationError names every bad field."""
    use_case = CreateRoleUseCase(uow_factory)

    with pytest.raises(ValidationError) as exc_info:
        await use_case.execute(
            "admin-1",
            RoleCreateInput(
                name="",
                category="wizardry",
                level=42,
                permission_ids=["grades:view", "dorms:assign"],
            ),
        )

    errors = exc_info.value.errors
    assert set(errors) == {"name", "category", "level", "permission_ids"}
    assert "dorms:assign" in errors["permission_ids"]
    assert store.roles == {}


@pytest.mark.asyncio
async def test_create_role_respects_configured_level_bounds(catalog, uow_factory) -> None:
    use_case = CreateRoleUseCase(uow_factory, min_level=1, max_level=5)

    with pytest.raises(ValidationError) as exc_info:
        await use_case.execute(
            "admin-1", RoleCreateInput(name="Dean", category="academic", level=6)
        )
    assert exc_info.value.errors == {"level": "Level must be between 1 and 5"}


@pytest.mark.asyncio
async def test_create_role_name_collision_is_case_insensitive(store, uow_factory) -> None:
    store.add_role(make_role("Registrar"))
    use_case = CreateRoleUseCase(uow_factory)

    with pytest.raises(DuplicateIdentifier):
        await use_case.execute(
            "admin-1", RoleCreateInput(name="registrar", category="academic", level=3)
        )


# --- UpdateRoleUseCase ---


@pytest.mark.asyncio
async def test_update_role_bumps_version_and_audits(store, catalog, uow_factory) -> None:
    role = store.add_role(make_role("Lecturer", ["grades:view"], level=4))
    use_case = UpdateRoleUseCase(uow_factory)

    updated = await use_case.execute(
        "admin-1",
        role.id,
        RolePatch(permission_ids=["grades:view", "grades:edit"], level=5),
    )

    assert updated.version == 2
    assert updated.level == 5
    assert store.roles[role.id].permission_ids == ["grades:view", "grades:edit"]
    entry = store.audit[-1]
    assert entry.action is AuditAction.ROLE_UPDATED
    assert entry.before["permission_ids"] == ["grades:view"]
    assert entry.after["permission_ids"] == ["grades:view", "grades:edit"]


@pytest.mark.asyncio
async def test_update_role_without_changes_is_a_no_op(store, catalog, uow_factory) -> None:
    role = store.add_role(make_role("Lecturer", ["grades:view"]))

    result = await UpdateRoleUseCase(uow_factory).execute(
        "admin-1", role.id, RolePatch(name=" Lecturer ")
    )

    assert result.version == 1
    assert store.audit == []


@pytest.mark.asyncio
async def test_system_role_rejects_edits(store, catalog, uow_factory) -> None:
    """A system role keeps every field when an edit is refused."""
    role = store.add_role(
        make_role("Super Admin", ["*"], category=RoleCategory.SYSTEM, level=10, is_system_role=True)
    )
    use_case = UpdateRoleUseCase(uow_factory)

    with pytest.raises(SystemRoleImmutable) as exc_info:
        await use_case.execute(
            "admin-1", role.id, RolePatch(name="Root", permission_ids=["grades:view"])
        )

    assert exc_info.value.fields == ["name", "permission_ids"]
    assert store.roles[role.id].name == "Super Admin"
    assert store.roles[role.id].permission_ids == ["*"]
    assert store.audit == []


@pytest.mark.asyncio
async def test_system_role_can_be_deactivated(store, uow_factory) -> None:
    role = store.add_role(make_role("Staff", is_system_role=True))

    updated = await UpdateRoleUseCase(uow_factory).execute(
        "admin-1", role.id, RolePatch(is_active=False)
    )

    assert updated.is_active is False
    assert updated.version == 2


@pytest.mark.asyncio
async def test_update_role_invalidates_cached_holders(store, catalog, uow_factory) -> None:
    role = store.add_role(make_role("Lecturer", ["grades:view"]))
    store.add_assignment(make_assignment("u-1", role))
    cache = InMemoryPermissionCache()
    generation = cache.generation("u-1")

    await UpdateRoleUseCase(uow_factory, permission_cache=cache).execute(
        "admin-1", role.id, RolePatch(is_active=False)
    )

    assert cache.generation("u-1") > generation


@pytest.mark.asyncio
async def test_update_missing_role(uow_factory) -> None:
    with pytest.raises(NotFound):
        await UpdateRoleUseCase(uow_factory).execute("admin-1", uuid4(), RolePatch(level=3))


# --- DeleteRoleUseCase / CloneRoleUseCase ---


@pytest.mark.asyncio
async def test_delete_role_blocked_by_inactive_assignment(store, uow_factory) -> None:
    """Any assignment, active or not, blocks the delete."""
    role = store.add_role(make_role("Tutor"))
    assignment = store.add_assignment(make_assignment("u-1", role, is_active=False))

    with pytest.raises(ReferentialConflict) as exc_info:
        await DeleteRoleUseCase(uow_factory).execute("admin-1", role.id)

    assert exc_info.value.blocking == [str(assignment.id)]
    assert role.id in store.roles


@pytest.mark.asyncio
async def test_delete_system_role_refused(store, uow_factory) -> None:
    role = store.add_role(make_role("Student", is_system_role=True))

    with pytest.raises(SystemRoleImmutable):
        await DeleteRoleUseCase(uow_factory).execute("admin-1", role.id)


@pytest.mark.asyncio
async def test_clone_then_delete(store, catalog, uow_factory) -> None:
    """Cloning copies permissions under a fresh id; the unassigned clone deletes cleanly."""
    source = store.add_role(
        make_role("Registrar", ["grades:edit", "grades:view"], level=6, is_system_role=True)
    )

    clone = await CloneRoleUseCase(uow_factory).execute("admin-1", source.id, "Deputy Registrar")

    assert clone.id != source.id
    assert clone.permission_ids == source.permission_ids
    assert clone.level == source.level
    assert clone.category == source.category
    assert clone.is_system_role is False
    assert clone.description.endswith("(Copy)")
    assert store.audit[-1].action is AuditAction.ROLE_CLONED

    await DeleteRoleUseCase(uow_factory).execute("admin-1", clone.id)

    assert clone.id not in store.roles
    assert source.id in store.roles
    assert store.audit[-1].action is AuditAction.ROLE_DELETED


@pytest.mark.asyncio
async def test_clone_name_collision(store, uow_factory) -> None:
    source = store.add_role(make_role("Registrar"))

    with pytest.raises(DuplicateIdentifier):
        await CloneRoleUseCase(uow_factory).execute("admin-1", source.id, "REGISTRAR")


# --- ToggleCategoryPermissionsUseCase ---


@pytest.mark.asyncio
async def test_toggle_category_is_idempotent(store, catalog, uow_factory) -> None:
    role = store.add_role(make_role("Bursar", ["reports:read"], category=RoleCategory.FINANCIAL))
    use_case = ToggleCategoryPermissionsUseCase(uow_factory)

    first = await use_case.execute("admin-1", role.id, "financial", True)
    audit_count = len(store.audit)
    second = await use_case.execute("admin-1", role.id, "financial", True)

    assert first.permission_ids == ["reports:read", "payments:approve", "payments:read"]
    assert second.permission_ids == first.permission_ids
    assert second.version == first.version
    assert len(store.audit) == audit_count

    cleared = await use_case.execute("admin-1", role.id, "financial", False)
    assert cleared.permission_ids == ["reports:read"]


@pytest.mark.asyncio
async def test_toggle_category_on_system_role(store, catalog, uow_factory) -> None:
    role = store.add_role(make_role("Registrar", is_system_role=True))

    with pytest.raises(SystemRoleImmutable):
        await ToggleCategoryPermissionsUseCase(uow_factory).execute(
            "admin-1", role.id, "academic", True
        )


@pytest.mark.asyncio
async def test_toggle_unknown_category(store, uow_factory) -> None:
    role = store.add_role(make_role("Bursar"))

    with pytest.raises(ValidationError):
        await ToggleCategoryPermissionsUseCase(uow_factory).execute(
            "admin-1", role.id, "sports", True
        )


# --- ListRolesUseCase / GetRoleUseCase ---


@pytest.mark.asyncio
async def test_list_roles_orders_by_level(store, uow_factory) -> None:
    store.add_role(make_role("Student", level=1))
    store.add_role(make_role("Registrar", level=6))
    store.add_role(make_role("Archived", level=9, is_active=False))

    roles = await ListRolesUseCase(uow_factory).execute(active_only=True)

    assert [r.name for r in roles] == ["Registrar", "Student"]


@pytest.mark.asyncio
async def test_get_role(store, uow_factory) -> None:
    role = store.add_role(make_role("Registrar"))

    assert (await GetRoleUseCase(uow_factory).execute(role.id)).name == "Registrar"


@pytest.mark.asyncio
async def test_deleting_original_leaves_clone_intact(store, catalog, uow_factory) -> None:
    source = store.add_role(make_role("Registrar", ["grades:edit", "grades:view"]))

    clone = await CloneRoleUseCase(uow_factory).execute(
        "admin-1", source.id, "Registrar (Copy)"
    )
    await DeleteRoleUseCase(uow_factory).execute("admin-1", source.id)

    assert source.id not in store.roles
    assert store.roles[clone.id].permission_ids == ["grades:edit", "grades:view"]


@pytest.mark.asyncio
async def test_toggle_adds_only_missing_category_permissions(store, uow_factory) -> None:
    financial = [
        "payments:create",
        "payments:read",
        "payments:update",
        "payments:delete",
        "payments:approve",
    ]
    for pid in financial:
        store.add_permission(make_permission(pid, PermissionCategory.FINANCIAL))
    role = store.add_role(make_role("Bursar", financial[:3], category=RoleCategory.FINANCIAL))
    use_case = ToggleCategoryPermissionsUseCase(uow_factory)

    updated = await use_case.execute("admin-1", role.id, "financial", True)

    assert updated.permission_ids[:3] == financial[:3]
    assert sorted(updated.permission_ids[3:]) == ["payments:approve", "payments:delete"]
    assert updated.version == 2
    again = await use_case.execute("admin-1", role.id, "financial", True)
    assert again.version == 2


# --- GetRoleAnalyticsUseCase ---


@pytest.mark.asyncio
async def test_role_analytics(store, uow_factory) -> None:
    store.add_role(
        make_role("Super Admin", ["*"], category=RoleCategory.SYSTEM, is_system_role=True)
    )
    lecturer = store.add_role(make_role("Lecturer", ["grades:view"]))
    bursar = store.add_role(make_role("Bursar", ["payments:read"], category=RoleCategory.FINANCIAL))
    retired = store.add_role(make_role("Retired Role", ["grades:view"], is_active=False))
    yesterday = T0 - timedelta(days=1)
    store.add_assignment(make_assignment("u-1", lecturer, assigned_at=yesterday))
    store.add_assignment(make_assignment("u-2", lecturer, assigned_at=yesterday))
    store.add_assignment(
        make_assignment("u-5", lecturer, assigned_at=yesterday, is_active=False)
    )
    store.add_assignment(
        make_assignment(
            "u-3",
            bursar,
            assigned_at=T0 - timedelta(days=10),
            expires_at=T0 + timedelta(days=5),
        )
    )
    store.add_assignment(make_assignment("u-4", retired, assigned_at=yesterday))

    analytics = await GetRoleAnalyticsUseCase(uow_factory).execute(now=T0)

    assert analytics.total_roles == 4
    assert analytics.active_roles == 3
    assert analytics.system_roles == 1
    assert analytics.custom_roles == 3
    assert analytics.roles_by_category == {"academic": 2, "financial": 1, "system": 1}
    assert [(r.name, n) for r, n in analytics.most_used] == [("Lecturer", 2), ("Bursar", 1)]
    assert analytics.recent_assignments == 4
    assert analytics.expiring_assignments == 1


@pytest.mark.asyncio
async def test_role_analytics_on_empty_registry(uow_factory) -> None:
    analytics = await GetRoleAnalyticsUseCase(uow_factory).execute(now=T0)

    assert analytics.total_roles == 0
    assert analytics.most_used == []
    assert analytics.roles_by_category == {}
