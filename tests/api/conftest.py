"""Fixtures for API tests."""

import pytest
from falcon.testing import TestClient

from portalauthz.domain.value_objects import PermissionCategory, RoleCategory
from portalauthz.infrastructure.cache.memory_permission_cache import InMemoryPermissionCache
from portalauthz.interfaces.api.app import create_api
from portalauthz.interfaces.api.middleware.auth import RequestUser

from tests.conftest import FakeStore, make_assignment, make_permission, make_role


class HeaderAuthMiddleware:
    """Middleware that takes the user id and token department from test headers."""

    async def process_request(self, req, resp):
        user_id = req.get_header("X-Test-User")
        department = req.get_header("X-Test-Department")
        req.context.user = (
            RequestUser(user_id=user_id, department=department) if user_id else None
        )


@pytest.fixture
def seeded_store(store: FakeStore) -> FakeStore:
    """Catalog, an admin role held by ``admin``, a read-only role held by ``viewer``."""
    for pid, category in [
        ("*", PermissionCategory.SYSTEM),
        ("roles:read", PermissionCategory.ADMINISTRATIVE),
        ("roles:manage", PermissionCategory.ADMINISTRATIVE),
        ("assignments:read", PermissionCategory.ADMINISTRATIVE),
        ("assignments:manage", PermissionCategory.ADMINISTRATIVE),
        ("grades:view", PermissionCategory.ACADEMIC),
        ("grades:edit", PermissionCategory.ACADEMIC),
        ("payments:read", PermissionCategory.FINANCIAL),
    ]:
        store.add_permission(make_permission(pid, category))

    admin = store.add_role(
        make_role(
            "Super Admin", ["*"], category=RoleCategory.SYSTEM, level=10, is_system_role=True
        )
    )
    viewer = store.add_role(make_role("Viewer", ["roles:read", "grades:view"], level=2))
    store.add_role(make_role("Registrar", ["grades:edit", "grades:view"], level=6))
    store.add_assignment(make_assignment("admin", admin))
    store.add_assignment(make_assignment("viewer", viewer))
    return store


@pytest.fixture
def app(seeded_store, uow_factory):
    """Falcon ASGI app over the in-memory store."""
    return create_api(
        uow_factory,
        middleware=[HeaderAuthMiddleware()],
        permission_cache=InMemoryPermissionCache(),
    )


@pytest.fixture
def client(app) -> TestClient:
    """Falcon ASGI test client."""
    return TestClient(app)


def as_user(user_id: str, department: str | None = None) -> dict[str, str]:
    headers = {"X-Test-User": user_id}
    if department:
        headers["X-Test-Department"] = department
    return headers
