"""puja series, expenses, one membership per application

Revision ID: 4f8d2c6e1a57
Revises: 9c1e4a7b2d30
Create Date: 2026-10-19 15:40:08.902117

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "4f8d2c6e1a57"
down_revision: Union[str, Sequence[str], None] = "9c1e4a7b2d30"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Make membership.application_id unique and add puja_series and expenses."""
    op.drop_index("ix_community_members_application_id", table_name="community_members")
    op.create_index(
        "ix_community_members_application_id",
        "community_members",
        ["application_id"],
        unique=True,
    )

    op.create_table(
        "puja_series",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("community_id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("type", sa.String(length=30), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("schedule_config", sa.JSON(), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=False, server_default="60"),
        sa.Column("max_participants", sa.Integer(), nullable=True),
        sa.Column("registration_required", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("priest_id", sa.String(length=64), nullable=True),
        sa.Column("location", sa.Text(), nullable=True),
        sa.Column("created_by", sa.String(length=64), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_puja_series_community_id", "puja_series", ["community_id"])
    op.create_index("ix_puja_series_created_at", "puja_series", ["created_at"])

    op.create_table(
        "expenses",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("community_id", sa.String(length=36), nullable=True),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("vendor_name", sa.Text(), nullable=False),
        sa.Column("receipt_number", sa.String(length=100), nullable=False),
        sa.Column("amount", sa.Numeric(14, 2), nullable=False),
        sa.Column("category", sa.String(length=20), nullable=False),
        sa.Column("expense_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("approved_by", sa.String(length=64), nullable=True),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
        sa.Column("created_by", sa.String(length=64), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_expenses_community_id", "expenses", ["community_id"])


def downgrade() -> None:
    """Drop the new tables and restore the plain application_id index."""
    op.drop_index("ix_expenses_community_id", table_name="expenses")
    op.drop_table("expenses")
    op.drop_index("ix_puja_series_created_at", table_name="puja_series")
    op.drop_index("ix_puja_series_community_id", table_name="puja_series")
    op.drop_table("puja_series")
    op.drop_index("ix_community_members_application_id", table_name="community_members")
    op.create_index("ix_community_members_application_id", "community_members", ["application_id"])
