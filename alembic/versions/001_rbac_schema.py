"""RBAC schema - permission catalog, roles, assignments and audit log.

Revision ID: 001
Revises:
Create Date: 2026-10-12

"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "permission",
        sa.Column("id", sa.String(100), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.String(500), nullable=False, server_default=""),
        sa.Column("category", sa.String(50), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_permission_category", "permission", ["category"])

    op.create_table(
        "role",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.String(500), nullable=False, server_default=""),
        sa.Column("category", sa.String(50), nullable=False),
        sa.Column("level", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("is_system_role", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("created_by", sa.String(255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.execute("CREATE UNIQUE INDEX ix_role_name_lower ON role (lower(name))")

    op.create_table(
        "role_permission",
        sa.Column(
            "role_id", sa.UUID(), sa.ForeignKey("role.id", ondelete="CASCADE"), primary_key=True
        ),
        sa.Column(
            "permission_id", sa.String(100), sa.ForeignKey("permission.id"), primary_key=True
        ),
        sa.Column("position", sa.Integer(), nullable=False),
    )
    op.create_index("ix_role_permission_permission", "role_permission", ["permission_id"])

    op.create_table(
        "role_assignment",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("role_id", sa.UUID(), sa.ForeignKey("role.id"), nullable=False),
        sa.Column("assigned_by", sa.String(255), nullable=False),
        sa.Column("assigned_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("scope", postgresql.JSONB(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("reason", sa.String(50), nullable=False, server_default="manual"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.CheckConstraint(
            "expires_at IS NULL OR expires_at > assigned_at",
            name="ck_role_assignment_expiry_after_assignment",
        ),
    )
    op.create_index("ix_role_assignment_user", "role_assignment", ["user_id", "is_active"])
    op.create_index("ix_role_assignment_role", "role_assignment", ["role_id"])
    op.create_index(
        "ix_role_assignment_expiry",
        "role_assignment",
        ["expires_at"],
        postgresql_where=sa.text("is_active AND expires_at IS NOT NULL"),
    )

    op.create_table(
        "audit_log",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("actor", sa.String(255), nullable=False),
        sa.Column("action", sa.String(50), nullable=False),
        sa.Column("target_type", sa.String(50), nullable=False),
        sa.Column("target_id", sa.String(255), nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.Column("transaction_id", sa.UUID(), nullable=False),
        sa.Column("before", postgresql.JSONB(), nullable=True),
        sa.Column("after", postgresql.JSONB(), nullable=True),
        sa.Column("subject", sa.String(255), nullable=True),
    )
    op.create_index("ix_audit_log_timestamp", "audit_log", ["timestamp"])
    op.create_index("ix_audit_log_subject", "audit_log", ["subject", "timestamp"])
    op.create_index("ix_audit_log_actor", "audit_log", ["actor", "timestamp"])
    op.create_index("ix_audit_log_transaction", "audit_log", ["transaction_id"])


def downgrade() -> None:
    op.drop_table("audit_log")
    op.drop_table("role_assignment")
    op.drop_table("role_permission")
    op.execute("DROP INDEX IF EXISTS ix_role_name_lower")
    op.drop_table("role")
    op.drop_table("permission")
