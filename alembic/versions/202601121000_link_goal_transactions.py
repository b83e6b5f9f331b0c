"""link goal transactions to their wallet transaction

Revision ID: 202601121000
Revises: 202601050900
Create Date: 2026-01-12 10:00:00.000000

"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op


revision = "202601121000"
down_revision = "202601050900"
branch_labels = None
depends_on = None

# Rows written before this revision were paired by timestamp only.
BACKFILL_WINDOW_SECONDS = 15


def upgrade() -> None:
    with op.batch_alter_table("goal_transactions") as batch_op:
        batch_op.add_column(
            sa.Column(
                "transaction_id",
                sa.String(length=40),
                sa.ForeignKey(
                    "transactions.id",
                    name="fk_goal_transactions_transaction_id",
                    ondelete="CASCADE",
                ),
                nullable=True,
            )
        )
        batch_op.create_index(
            "ix_goal_transactions_transaction_id", ["transaction_id"]
        )

    bind = op.get_bind()
    unlinked = bind.execute(
        sa.text(
            "SELECT id, wallet_id, type, created_at FROM goal_transactions "
            "WHERE transaction_id IS NULL AND wallet_id IS NOT NULL "
            "ORDER BY created_at, id"
        )
    ).fetchall()
    for gtx_id, wallet_id, gtx_type, created_at in unlinked:
        category = "Savings" if gtx_type == "topup" else "Savings Withdrawal"
        match = bind.execute(
            sa.text(
                "SELECT t.id FROM transactions t "
                "WHERE t.wallet_id = :wallet_id AND t.category = :category "
                "AND ABS(julianday(t.created_at) - julianday(:created_at)) * 86400 "
                "<= :window "
                "AND NOT EXISTS (SELECT 1 FROM goal_transactions g "
                "WHERE g.transaction_id = t.id) "
                "ORDER BY t.created_at, t.id LIMIT 1"
            ),
            {
                "wallet_id": wallet_id,
                "category": category,
                "created_at": created_at,
                "window": BACKFILL_WINDOW_SECONDS,
            },
        ).scalar()
        if match is not None:
            bind.execute(
                sa.text(
                    "UPDATE goal_transactions SET transaction_id = :txn WHERE id = :id"
                ),
                {"txn": match, "id": gtx_id},
            )


def downgrade() -> None:
    with op.batch_alter_table("goal_transactions") as batch_op:
        batch_op.drop_index("ix_goal_transactions_transaction_id")
        batch_op.drop_column("transaction_id")
