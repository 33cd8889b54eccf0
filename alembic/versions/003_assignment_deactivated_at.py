"""Record when a role assignment was deactivated.

Revision ID: 003
Revises: 002
Create Date: 2026-10-16

"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa

revision: str = "003"
down_revision: str | None = "002"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.add_column(
        "role_assignment",
        sa.Column("deactivated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_check_constraint(
        "ck_role_assignment_deactivated_after_assignment",
        "role_assignment",
        "deactivated_at IS NULL OR deactivated_at >= assigned_at",
    )


def downgrade() -> None:
    op.drop_constraint(
        "ck_role_assignment_deactivated_after_assignment", "role_assignment", type_="check"
    )
    op.drop_column("role_assignment", "deactivated_at")
