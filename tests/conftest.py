"""Pytest fixtures for portal-authz tests."""

from __future__ import annotations

import copy
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

import pytest

from portalauthz.domain.entities import AuditEntry, Permission, Role, RoleAssignment
from portalauthz.domain.exceptions import StoreUnavailable
from portalauthz.domain.value_objects import (
    AuditAction,
    PermissionCategory,
    RoleCategory,
)

T0 = datetime(2026, 3, 1, 9, 0, tzinfo=UTC)


# --- Shared in-memory store ---


class FakeStore:
    """State shared by every unit of work of one test."""

    def __init__(self) -> None:
        self.permissions: dict[str, Permission] = {}
        self.roles: dict[UUID, Role] = {}
        self.assignments: dict[UUID, RoleAssignment] = {}
        self.audit: list[AuditEntry] = []
        self.unavailable = False
        self.fail_audit = False
        self.commits = 0

    def snapshot(self) -> dict:
        return copy.deepcopy(
            {
                "permissions": self.permissions,
                "roles": self.roles,
                "assignments": self.assignments,
                "audit": self.audit,
            }
        )

    def restore(self, saved: dict) -> None:
        self.permissions = saved["permissions"]
        self.roles = saved["roles"]
        self.assignments = saved["assignments"]
        self.audit = saved["audit"]

    def add_permission(self, permission: Permission) -> Permission:
        self.permissions[permission.id] = permission
        return permission

    def add_role(self, role: Role) -> Role:
        self.roles[role.id] = role
        return role

    def add_assignment(self, assignment: RoleAssignment) -> RoleAssignment:
        self.assignments[assignment.id] = assignment
        return assignment


# --- Fake repositories ---


class FakePermissionRepository:
    """In-memory permission catalog."""

    def __init__(self, store: FakeStore) -> None:
        self._store = store

    async def get_by_id(self, permission_id: str) -> Permission | None:
        return self._store.permissions.get(permission_id)

    async def get_many(self, permission_ids: list[str]) -> list[Permission]:
        return [self._store.permissions[p] for p in permission_ids if p in self._store.permissions]

    async def list(
        self,
        *,
        category: PermissionCategory | None = None,
        search: str | None = None,
    ) -> list[Permission]:
        items = list(self._store.permissions.values())
        if category:
            items = [p for p in items if p.category == category]
        if search:
            needle = search.lower()
            items = [
                p
                for p in items
                if needle in p.id.lower()
                or needle in p.name.lower()
                or needle in p.description.lower()
            ]
        return sorted(items, key=lambda p: (p.category.value, p.id))

    async def create(self, permission: Permission) -> Permission:
        self._store.permissions[permission.id] = permission
        return permission

    async def update(self, permission: Permission) -> None:
        self._store.permissions[permission.id] = permission

    async def delete(self, permission_id: str) -> None:
        self._store.permissions.pop(permission_id, None)


class FakeRoleRepository:
    """In-memory role registry."""

    def __init__(self, store: FakeStore) -> None:
        self._store = store

    async def get_by_id(self, role_id: UUID, *, for_update: bool = False) -> Role | None:
        return self._store.roles.get(role_id)

    async def get_by_name(self, name: str) -> Role | None:
        for role in self._store.roles.values():
            if role.name.lower() == name.lower():
                return role
        return None

    async def get_many(self, role_ids: list[UUID]) -> list[Role]:
        return [self._store.roles[r] for r in role_ids if r in self._store.roles]

    async def list(
        self,
        *,
        category: RoleCategory | None = None,
        active_only: bool = False,
    ) -> list[Role]:
        items = list(self._store.roles.values())
        if category:
            items = [r for r in items if r.category == category]
        if active_only:
            items = [r for r in items if r.is_active]
        return items

    async def list_referencing_permission(self, permission_id: str) -> list[Role]:
        return [r for r in self._store.roles.values() if permission_id in r.permission_ids]

    async def create(self, role: Role) -> Role:
        self._store.roles[role.id] = role
        return role

    async def update(self, role: Role) -> None:
        self._store.roles[role.id] = role

    async def delete(self, role_id: UUID) -> None:
        self._store.roles.pop(role_id, None)


class FakeAssignmentRepository:
    """In-memory assignment ledger."""

    def __init__(self, store: FakeStore) -> None:
        self._store = store

    async def get_by_id(
        self, assignment_id: UUID, *, for_update: bool = False
    ) -> RoleAssignment | None:
        return self._store.assignments.get(assignment_id)

    async def list_by_user(
        self, user_id: str, *, include_inactive: bool = True
    ) -> list[RoleAssignment]:
        return [
            a
            for a in self._store.assignments.values()
            if a.user_id == user_id and (include_inactive or a.is_active)
        ]

    async def list_by_role(
        self, role_id: UUID, *, include_inactive: bool = False
    ) -> list[RoleAssignment]:
        return [
            a
            for a in self._store.assignments.values()
            if a.role_id == role_id and (include_inactive or a.is_active)
        ]

    async def list_expiring(self, start: datetime, end: datetime) -> list[RoleAssignment]:
        return [
            a
            for a in self._store.assignments.values()
            if a.is_active and a.expires_at is not None and start <= a.expires_at <= end
        ]

    async def count_active_by_role(self, at: datetime) -> dict[UUID, int]:
        counts: dict[UUID, int] = {}
        for a in self._store.assignments.values():
            if a.is_active and a.assigned_at <= at and not a.is_expired_at(at):
                counts[a.role_id] = counts.get(a.role_id, 0) + 1
        return counts

    async def count_assigned_since(self, since: datetime) -> int:
        return sum(1 for a in self._store.assignments.values() if a.assigned_at >= since)

    async def create_batch(self, assignments: list[RoleAssignment]) -> list[RoleAssignment]:
        for a in assignments:
            self._store.assignments[a.id] = a
        return assignments

    async def update(self, assignment: RoleAssignment) -> None:
        self._store.assignments[assignment.id] = assignment


class FakeAuditRepository:
    """In-memory append-only audit log."""

    def __init__(self, store: FakeStore) -> None:
        self._store = store

    async def append(self, entries: list[AuditEntry]) -> None:
        if self._store.fail_audit:
            raise StoreUnavailable("audit log write failed")
        self._store.audit.extend(entries)

    async def list(
        self,
        *,
        actor: str | None = None,
        subject: str | None = None,
        target_id: str | None = None,
        actions: list[AuditAction] | None = None,
        since: datetime | None = None,
        until: datetime | None = None,
        limit: int = 100,
    ) -> list[AuditEntry]:
        items = [
            e
            for e in self._store.audit
            if (actor is None or e.actor == actor)
            and (subject is None or e.subject == subject)
            and (target_id is None or e.target_id == target_id)
            and (not actions or e.action in actions)
            and (since is None or e.timestamp >= since)
            and (until is None or e.timestamp <= until)
        ]
        items.sort(key=lambda e: e.timestamp, reverse=True)
        return items[:limit]


# --- Fake UnitOfWork ---


class FakeUnitOfWork:
    """In-memory Unit of Work over a FakeStore."""

    def __init__(self, store: FakeStore | None = None) -> None:
        self.store = store or FakeStore()
        self.permissions = FakePermissionRepository(self.store)
        self.roles = FakeRoleRepository(self.store)
        self.assignments = FakeAssignmentRepository(self.store)
        self.audit = FakeAuditRepository(self.store)

    async def commit(self) -> None:
        self.store.commits += 1

    async def rollback(self) -> None:
        pass


def make_uow_factory(store: FakeStore):
    """Factory with transaction semantics: any exception restores the store."""

    @asynccontextmanager
    async def factory() -> AsyncIterator[FakeUnitOfWork]:
        if store.unavailable:
            raise StoreUnavailable("store is down")
        saved = store.snapshot()
        uow = FakeUnitOfWork(store)
        try:
            yield uow
        except BaseException:
            store.restore(saved)
            raise
        await uow.commit()

    return factory


# --- Builders ---


def make_permission(
    permission_id: str,
    category: PermissionCategory = PermissionCategory.ACADEMIC,
    name: str | None = None,
) -> Permission:
    return Permission(
        id=permission_id,
        name=name or permission_id,
        description=f"{permission_id} permission",
        category=category,
        created_at=T0,
        updated_at=T0,
    )


def make_role(
    name: str,
    permission_ids: list[str] | None = None,
    *,
    category: RoleCategory = RoleCategory.ACADEMIC,
    level: int = 5,
    is_active: bool = True,
    is_system_role: bool = False,
) -> Role:
    return Role(
        id=uuid4(),
        name=name,
        description=f"{name} role",
        category=category,
        level=level,
        created_at=T0,
        updated_at=T0,
        permission_ids=list(permission_ids or []),
        is_active=is_active,
        is_system_role=is_system_role,
    )


def make_assignment(
    user_id: str,
    role: Role,
    *,
    assigned_at: datetime = T0,
    expires_at: datetime | None = None,
    scope: dict[str, str] | None = None,
    is_active: bool = True,
    deactivated_at: datetime | None = None,
) -> RoleAssignment:
    return RoleAssignment(
        id=uuid4(),
        user_id=user_id,
        role_id=role.id,
        assigned_by="admin-1",
        assigned_at=assigned_at,
        expires_at=expires_at,
        scope=scope,
        is_active=is_active,
        deactivated_at=deactivated_at,
    )


class FixedClock:
    """Injectable clock for the permission gate."""

    def __init__(self, now: datetime = T0) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


# --- Fixtures ---


@pytest.fixture
def store() -> FakeStore:
    """Fresh in-memory store for each test."""
    return FakeStore()


@pytest.fixture
def uow_factory(store: FakeStore):
    """Factory returning async context manager with a FakeUnitOfWork over ``store``."""
    return make_uow_factory(store)


@pytest.fixture
def catalog(store: FakeStore) -> dict[str, Permission]:
    """A small university permission catalog."""
    permissions = [
        make_permission("grades:view"),
        make_permission("grades:edit"),
        make_permission("courses:read"),
        make_permission("payments:read", PermissionCategory.FINANCIAL),
        make_permission("payments:approve", PermissionCategory.FINANCIAL),
        make_permission("reports:read", PermissionCategory.REPORTING),
        make_permission("*", PermissionCategory.SYSTEM),
    ]
    return {p.id: store.add_permission(p) for p in permissions}


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()
