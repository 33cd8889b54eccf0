"""Unit tests for permission catalog use cases."""

import pytest

from portalauthz.application.dto.role_dto import PermissionCreateInput, PermissionPatch
from portalauthz.application.use_cases.catalog.create_permission import CreatePermissionUseCase
from portalauthz.application.use_cases.catalog.delete_permission import DeletePermissionUseCase
from portalauthz.application.use_cases.catalog.list_permissions import (
    GetPermissionUseCase,
    ListPermissionCategoriesUseCase,
    ListPermissionsUseCase,
)
from portalauthz.application.use_cases.catalog.update_permission import UpdatePermissionUseCase
from portalauthz.domain.exceptions import (
    DuplicateIdentifier,
    NotFound,
    ReferentialConflict,
    ValidationError,
)
from portalauthz.domain.value_objects import AuditAction, PermissionCategory

from tests.conftest import make_role


@pytest.mark.asyncio
async def test_create_permission_success(store, uow_factory) -> None:
    """CreatePermissionUseCase registers the permission and audits it."""
    use_case = CreatePermissionUseCase(uow_factory)

    permission = await use_case.execute(
        "admin-1",
        PermissionCreateInput(
            id="transcripts:issue",
            name="Issue transcripts",
            category="academic",
            description=" Issue official transcripts ",
        ),
    )

    assert permission.category is PermissionCategory.ACADEMIC
    assert permission.description == "Issue official transcripts"
    assert store.permissions["transcripts:issue"] == permission
    assert [e.action for e in store.audit] == [AuditAction.PERMISSION_CREATED]
    assert store.audit[0].actor == "admin-1"


@pytest.mark.asyncio
async def test_create_permission_reports_every_invalid_field(store, uow_factory) -> None:
    use_case = CreatePermissionUseCase(uow_factory)

    with pytest.raises(ValidationError) as exc_info:
        await use_case.execute(
            "admin-1", PermissionCreateInput(id="Bad Id", name=" ", category="sports")
        )

    assert set(exc_info.value.errors) == {"id", "name", "category"}
    assert store.permissions == {}
    assert store.audit == []


@pytest.mark.asyncio
async def test_create_permission_duplicate(catalog, uow_factory) -> None:
    use_case = CreatePermissionUseCase(uow_factory)

    with pytest.raises(DuplicateIdentifier, match="grades:edit"):
        await use_case.execute(
            "admin-1", PermissionCreateInput(id="grades:edit", name="Edit", category="academic")
        )


@pytest.mark.asyncio
async def test_update_permission_changes_metadata_only(store, catalog, uow_factory) -> None:
    use_case = UpdatePermissionUseCase(uow_factory)

    updated = await use_case.execute(
        "admin-1",
        "grades:view",
        PermissionPatch(name="View grades", category="reporting"),
    )

    assert updated.id == "grades:view"
    assert updated.name == "View grades"
    assert updated.category is PermissionCategory.REPORTING
    assert store.permissions["grades:view"].name == "View grades"
    assert store.audit[-1].action is AuditAction.PERMISSION_UPDATED
    assert store.audit[-1].before["name"] == "grades:view"


@pytest.mark.asyncio
async def test_update_permission_not_found(catalog, uow_factory) -> None:
    use_case = UpdatePermissionUseCase(uow_factory)

    with pytest.raises(NotFound, match="Permission"):
        await use_case.execute("admin-1", "grades:delete", PermissionPatch(name="x"))


@pytest.mark.asyncio
async def test_delete_permission_referenced_by_roles(store, catalog, uow_factory) -> None:
    """Delete is refused while roles hold the permission; the conflict names them."""
    store.add_role(make_role("Registrar", ["grades:edit"]))
    store.add_role(make_role("Lecturer", ["grades:edit", "grades:view"]))
    use_case = DeletePermissionUseCase(uow_factory)

    with pytest.raises(ReferentialConflict) as exc_info:
        await use_case.execute("admin-1", "grades:edit")

    assert exc_info.value.blocking == ["Lecturer", "Registrar"]
    assert "grades:edit" in store.permissions


@pytest.mark.asyncio
async def test_delete_unreferenced_permission(store, catalog, uow_factory) -> None:
    use_case = DeletePermissionUseCase(uow_factory)

    await use_case.execute("admin-1", "reports:read")

    assert "reports:read" not in store.permissions
    assert store.audit[-1].action is AuditAction.PERMISSION_DELETED
    assert store.audit[-1].before["id"] == "reports:read"


@pytest.mark.asyncio
async def test_delete_missing_permission(catalog, uow_factory) -> None:
    with pytest.raises(NotFound):
        await DeletePermissionUseCase(uow_factory).execute("admin-1", "grades:delete")


@pytest.mark.asyncio
async def test_list_permissions_filters(catalog, uow_factory) -> None:
    use_case = ListPermissionsUseCase(uow_factory)

    financial = await use_case.execute(category="financial")
    assert [p.id for p in financial] == ["payments:approve", "payments:read"]

    grades = await use_case.execute(search="GRADES")
    assert {p.id for p in grades} == {"grades:view", "grades:edit"}

    with pytest.raises(ValidationError):
        await use_case.execute(category="sports")


@pytest.mark.asyncio
async def test_get_permission(catalog, uow_factory) -> None:
    use_case = GetPermissionUseCase(uow_factory)

    assert (await use_case.execute("courses:read")).id == "courses:read"
    with pytest.raises(NotFound):
        await use_case.execute("courses:write")


@pytest.mark.asyncio
async def test_list_categories_counts_catalog_entries(catalog, uow_factory) -> None:
    categories = await ListPermissionCategoriesUseCase(uow_factory).execute()

    counts = {category.value: count for category, count in categories}
    assert list(counts) == [c.value for c in PermissionCategory]
    assert counts["academic"] == 3
    assert counts["financial"] == 2
    assert counts["communication"] == 0
