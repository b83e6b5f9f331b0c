"""initial ledger schema

Revision ID: 202601050900
Revises:
Create Date: 2026-01-05 09:00:00.000000

"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op


revision = "202601050900"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "wallets",
        sa.Column("id", sa.String(length=40), primary_key=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column(
            "type",
            sa.Enum(
                "cash", "bank", "ewallet", "other",
                name="wallettype",
                create_constraint=True,
            ),
            nullable=False,
        ),
        sa.Column("icon", sa.String(length=16), nullable=False),
        sa.Column("color", sa.String(length=9), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_table(
        "budgets",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("category", sa.String(length=100), nullable=False, unique=True),
        sa.Column("monthly_limit", sa.Integer(), nullable=False, server_default="0"),
        sa.CheckConstraint("monthly_limit >= 0", name="ck_budgets_limit_positive"),
    )
    op.create_table(
        "transactions",
        sa.Column("id", sa.String(length=40), primary_key=True),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column(
            "type",
            sa.Enum(
                "income", "expense",
                name="transactiontype",
                create_constraint=True,
            ),
            nullable=False,
        ),
        sa.Column("category", sa.String(length=100), nullable=False),
        sa.Column("amount", sa.Integer(), nullable=False),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column(
            "wallet_id", sa.String(length=40), sa.ForeignKey("wallets.id"), nullable=True
        ),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("amount >= 0", name="ck_transactions_amount_positive"),
    )
    op.create_index("ix_transactions_date", "transactions", ["date"])
    op.create_index("ix_transactions_wallet_id", "transactions", ["wallet_id"])
    op.create_index("ix_transactions_category", "transactions", ["category"])
    op.create_table(
        "goals",
        sa.Column("id", sa.String(length=40), primary_key=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("target_amount", sa.Integer(), nullable=False),
        sa.Column("deadline", sa.Date(), nullable=True),
        sa.Column("icon", sa.String(length=16), nullable=False),
        sa.Column("color", sa.String(length=9), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_table(
        "goal_transactions",
        sa.Column("id", sa.String(length=40), primary_key=True),
        sa.Column(
            "goal_id", sa.String(length=40), sa.ForeignKey("goals.id"), nullable=False
        ),
        sa.Column(
            "type",
            sa.Enum(
                "topup", "withdraw",
                name="goaltransactiontype",
                create_constraint=True,
            ),
            nullable=False,
        ),
        sa.Column("amount", sa.Integer(), nullable=False),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("wallet_id", sa.String(length=40), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint(
            "amount >= 0", name="ck_goal_transactions_amount_positive"
        ),
    )
    op.create_index("ix_goal_transactions_goal_id", "goal_transactions", ["goal_id"])


def downgrade() -> None:
    op.drop_index("ix_goal_transactions_goal_id", table_name="goal_transactions")
    op.drop_table("goal_transactions")
    op.drop_table("goals")
    op.drop_index("ix_transactions_category", table_name="transactions")
    op.drop_index("ix_transactions_wallet_id", table_name="transactions")
    op.drop_index("ix_transactions_date", table_name="transactions")
    op.drop_table("transactions")
    op.drop_table("budgets")
    op.drop_table("wallets")
