"""Seed the university permission catalog and system roles.

Revision ID: 002
Revises: 001
Create Date: 2026-10-12

"""

from collections.abc import Sequence
from datetime import UTC, datetime
from uuid import NAMESPACE_URL, uuid5

from alembic import op
import sqlalchemy as sa

revision: str = "002"
down_revision: str | None = "001"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

PERMISSIONS = [
    ("students:create", "Create new student records", "academic"),
    ("students:read", "View student information", "academic"),
    ("students:update", "Update student information", "academic"),
    ("students:delete", "Delete student records", "academic"),
    ("students:manage", "Full student management access", "academic"),
    ("courses:create", "Create new courses", "academic"),
    ("courses:read", "View course information", "academic"),
    ("courses:update", "Update course information", "academic"),
    ("courses:delete", "Delete courses", "academic"),
    ("courses:manage", "Full course management access", "academic"),
    ("grades:create", "Enter student grades", "academic"),
    ("grades:read", "View student grades", "academic"),
    ("grades:update", "Update student grades", "academic"),
    ("grades:delete", "Delete grade records", "academic"),
    ("grades:approve", "Approve and finalize grades", "academic"),
    ("grades:manage", "Full grade management access", "academic"),
    ("payments:create", "Process student payments", "financial"),
    ("payments:read", "View payment information", "financial"),
    ("payments:update", "Update payment records", "financial"),
    ("payments:delete", "Delete payment records", "financial"),
    ("payments:approve", "Approve payment transactions", "financial"),
    ("payments:manage", "Full payment management access", "financial"),
    ("users:create", "Create new user accounts", "administrative"),
    ("users:read", "View user information", "administrative"),
    ("users:update", "Update user information", "administrative"),
    ("users:delete", "Delete user accounts", "administrative"),
    ("users:manage", "Full user management access", "administrative"),
    ("roles:read", "View role information", "administrative"),
    ("roles:manage", "Create, edit, clone and delete roles", "administrative"),
    ("assignments:read", "View role assignments and effective permissions", "administrative"),
    ("assignments:manage", "Assign, update and remove user roles", "administrative"),
    ("permissions:read", "View the permission catalog", "system"),
    ("permissions:manage", "Edit the permission catalog", "system"),
    ("reports:create", "Create custom reports", "reporting"),
    ("reports:read", "View system reports", "reporting"),
    ("reports:export", "Export report data", "reporting"),
    ("reports:manage", "Full report management access", "reporting"),
    ("audit:read", "View audit logs", "system"),
    ("audit:export", "Export audit logs", "system"),
    ("notifications:create", "Send notifications", "communication"),
    ("notifications:read", "View notifications", "communication"),
    ("announcements:create", "Create announcements", "communication"),
    ("announcements:read", "View announcements", "communication"),
    ("system:admin", "Full system administration access", "system"),
    ("system:config", "Update system configuration", "system"),
    ("system:backup", "Create system backups", "system"),
    ("system:restore", "Restore system from backup", "system"),
    ("*", "All system permissions (Super Admin)", "system"),
]

# name, description, category, level, permission ids
ROLES = [
    ("Super Admin", "Full system access with all permissions", "system", 10, ["*"]),
    (
        "Administrator",
        "System administrator with most permissions",
        "administrative",
        9,
        [
            "users:manage", "roles:read", "roles:manage", "assignments:read",
            "assignments:manage", "permissions:read", "students:manage", "courses:manage",
            "grades:read", "payments:read", "reports:read", "reports:export", "audit:read",
            "notifications:create", "announcements:create", "system:config",
        ],
    ),
    (
        "Academic Coordinator",
        "Manages academic affairs and student records",
        "academic",
        7,
        [
            "students:manage", "courses:manage", "grades:manage", "grades:approve",
            "reports:read", "notifications:create", "announcements:read",
        ],
    ),
    (
        "Finance Officer",
        "Manages financial transactions and payments",
        "financial",
        6,
        ["payments:manage", "students:read", "reports:read", "reports:export", "notifications:create"],
    ),
    (
        "Registrar",
        "Manages student registration and academic records",
        "academic",
        6,
        [
            "students:manage", "courses:read", "grades:read", "grades:approve",
            "reports:read", "notifications:create",
        ],
    ),
    (
        "Student Affairs Officer",
        "Manages student services and support",
        "support",
        5,
        [
            "students:read", "students:update", "notifications:create",
            "announcements:create", "reports:read",
        ],
    ),
    (
        "IT Support",
        "Technical support and system maintenance",
        "support",
        5,
        ["users:read", "system:config", "audit:read", "reports:read"],
    ),
    (
        "Instructor",
        "Teaching staff with grade management access",
        "academic",
        4,
        [
            "students:read", "courses:read", "grades:create", "grades:update",
            "announcements:create", "notifications:read",
        ],
    ),
    (
        "Staff",
        "General staff with basic access",
        "administrative",
        3,
        ["students:read", "courses:read", "announcements:read", "notifications:read"],
    ),
    (
        "Student",
        "Student portal access",
        "academic",
        1,
        ["courses:read", "grades:read", "payments:read", "announcements:read", "notifications:read"],
    ),
]

permission_table = sa.table(
    "permission",
    sa.column("id", sa.String),
    sa.column("name", sa.String),
    sa.column("description", sa.String),
    sa.column("category", sa.String),
    sa.column("created_at", sa.DateTime(timezone=True)),
    sa.column("updated_at", sa.DateTime(timezone=True)),
)
role_table = sa.table(
    "role",
    sa.column("id", sa.UUID),
    sa.column("name", sa.String),
    sa.column("description", sa.String),
    sa.column("category", sa.String),
    sa.column("level", sa.Integer),
    sa.column("is_active", sa.Boolean),
    sa.column("is_system_role", sa.Boolean),
    sa.column("version", sa.Integer),
    sa.column("created_by", sa.String),
    sa.column("created_at", sa.DateTime(timezone=True)),
    sa.column("updated_at", sa.DateTime(timezone=True)),
)
role_permission_table = sa.table(
    "role_permission",
    sa.column("role_id", sa.UUID),
    sa.column("permission_id", sa.String),
    sa.column("position", sa.Integer),
)


def _role_id(name: str):
    return uuid5(NAMESPACE_URL, f"portal-authz:role:{name}")


def _permission_name(permission_id: str) -> str:
    if permission_id == "*":
        return "All Permissions"
    resource, action = permission_id.split(":")
    return f"{resource.replace('_', ' ').title()}: {action.title()}"


def upgrade() -> None:
    now = datetime.now(UTC)
    op.bulk_insert(
        permission_table,
        [
            {
                "id": pid,
                "name": _permission_name(pid),
                "description": description,
                "category": category,
                "created_at": now,
                "updated_at": now,
            }
            for pid, description, category in PERMISSIONS
        ],
    )
    op.bulk_insert(
        role_table,
        [
            {
                "id": _role_id(name),
                "name": name,
                "description": description,
                "category": category,
                "level": level,
                "is_active": True,
                "is_system_role": True,
                "version": 1,
                "created_by": "system",
                "created_at": now,
                "updated_at": now,
            }
            for name, description, category, level, _ in ROLES
        ],
    )
    op.bulk_insert(
        role_permission_table,
        [
            {"role_id": _role_id(name), "permission_id": pid, "position": position}
            for name, _, _, _, permission_ids in ROLES
            for position, pid in enumerate(permission_ids)
        ],
    )


def downgrade() -> None:
    role_ids = [_role_id(name) for name, *_ in ROLES]
    op.execute(role_table.delete().where(role_table.c.id.in_(role_ids)))
    op.execute(
        permission_table.delete().where(
            permission_table.c.id.in_([pid for pid, _, _ in PERMISSIONS])
        )
    )
