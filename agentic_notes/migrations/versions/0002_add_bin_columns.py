"""Add bin columns to notes

Existing rows become active notes: is_binned defaults to 0 and
binned_timestamp to NULL.

Revision ID: 0002
Revises: 0001
Create Date: 2025-07-14 09:30:00
"""

from alembic import op
import sqlalchemy as sa

revision = "0002"
down_revision = "0001"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.add_column(
        "notes",
        sa.Column("is_binned", sa.Boolean(), nullable=False, server_default=sa.text("0")),
    )
    op.add_column(
        "notes",
        sa.Column("binned_timestamp", sa.DateTime(), nullable=True),
    )


def downgrade() -> None:
    with op.batch_alter_table("notes") as batch_op:
        batch_op.drop_column("binned_timestamp")
        batch_op.drop_column("is_binned")
