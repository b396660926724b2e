"""initial schema

Revision ID: 3f1c2a9d8e07
Revises:
Create Date: 2026-10-19
"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

revision: str = "3f1c2a9d8e07"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "bills",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("uuid", sa.String(26), nullable=False, unique=True),
        sa.Column("bill_type", sa.String(10), nullable=False),
        sa.Column("period", sa.Text, nullable=False),
        sa.Column("cost", sa.Float, nullable=False),
        sa.Column("consumption", sa.Float, nullable=False),
        sa.Column("unit", sa.String(10), nullable=False),
        sa.Column("year", sa.Integer, nullable=False),
        sa.Column("month", sa.Integer, nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("confirmed", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_bills_year_type_confirmed", "bills", ["year", "bill_type", "confirmed"])

    op.create_table(
        "yearly_stats",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("year", sa.Integer, nullable=False, unique=True),
        sa.Column("energy_total_cost", sa.Float, nullable=False, server_default="0"),
        sa.Column("energy_total_consumed", sa.Float, nullable=False, server_default="0"),
        sa.Column("energy_bill_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("gas_total_cost", sa.Float, nullable=False, server_default="0"),
        sa.Column("gas_total_consumed", sa.Float, nullable=False, server_default="0"),
        sa.Column("gas_bill_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("combined_total_cost", sa.Float, nullable=False, server_default="0"),
    )


def downgrade() -> None:
    op.drop_table("yearly_stats")
    op.drop_index("ix_bills_year_type_confirmed", table_name="bills")
    op.drop_table("bills")
