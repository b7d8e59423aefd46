"""create clients table

Revision ID: c1d2e3f4a5b6
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "c1d2e3f4a5b6"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "clients",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("company_name", sa.String(length=255), nullable=False),
        sa.Column("contact_name", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=50), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("subscription_date", sa.Date(), nullable=False),
        sa.Column("subscription_status", sa.String(length=20), nullable=False, server_default="active"),
        sa.Column("subscription_end_date", sa.Date(), nullable=True),
        sa.Column("payment_due_day", sa.Integer(), nullable=False),
        sa.Column("payment_due_month", sa.Integer(), nullable=True),
        sa.Column("last_payment_date", sa.Date(), nullable=True),
        sa.Column("quotation_file", sa.String(length=1024), nullable=True),
        sa.Column("quotation_amount", sa.Float(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("quotation_amount >= 0", name="ck_clients_quotation_amount_non_negative"),
        sa.CheckConstraint("payment_due_day BETWEEN 1 AND 31", name="ck_clients_payment_due_day"),
        sa.CheckConstraint(
            "payment_due_month IS NULL OR payment_due_month BETWEEN 1 AND 12",
            name="ck_clients_payment_due_month",
        ),
    )
    op.create_index("ix_clients_company_name", "clients", ["company_name"])


def downgrade() -> None:
    op.drop_index("ix_clients_company_name", table_name="clients")
    op.drop_table("clients")
