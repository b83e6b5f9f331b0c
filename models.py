from datetime import date, datetime
from enum import Enum
from typing import Optional

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    Enum as SAEnum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from database import Base


class WalletType(str, Enum):
    cash = "cash"
    bank = "bank"
    ewallet = "ewallet"
    other = "other"


class TransactionType(str, Enum):
    income = "income"
    expense = "expense"


class GoalTransactionType(str, Enum):
    topup = "topup"
    withdraw = "withdraw"


WALLET_TYPE_ENUM = SAEnum(WalletType, name="wallettype", create_constraint=True)
TRANSACTION_TYPE_ENUM = SAEnum(
    TransactionType, name="transactiontype", create_constraint=True
)
GOAL_TRANSACTION_TYPE_ENUM = SAEnum(
    GoalTransactionType, name="goaltransactiontype", create_constraint=True
)


class CreatedAtMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.now, nullable=False
    )


class Wallet(Base, CreatedAtMixin):
    __tablename__ = "wallets"

    id: Mapped[str] = mapped_column(String(40), primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    type: Mapped[WalletType] = mapped_column(WALLET_TYPE_ENUM, nullable=False)
    icon: Mapped[str] = mapped_column(String(16), nullable=False, default="💰")
    color: Mapped[str] = mapped_column(String(9), nullable=False, default="#10B981")


class Budget(Base):
    __tablename__ = "budgets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    category: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    monthly_limit: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint("monthly_limit >= 0", name="ck_budgets_limit_positive"),
    )


class Transaction(Base, CreatedAtMixin):
    __tablename__ = "transactions"

    id: Mapped[str] = mapped_column(String(40), primary_key=True)
    date: Mapped[date] = mapped_column(Date, nullable=False)
    type: Mapped[TransactionType] = mapped_column(
        TRANSACTION_TYPE_ENUM, nullable=False
    )
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    note: Mapped[Optional[str]] = mapped_column(Text)
    wallet_id: Mapped[Optional[str]] = mapped_column(ForeignKey("wallets.id"))

    __table_args__ = (
        Index("ix_transactions_date", "date"),
        Index("ix_transactions_wallet_id", "wallet_id"),
        Index("ix_transactions_category", "category"),
        CheckConstraint("amount >= 0", name="ck_transactions_amount_positive"),
    )


class Goal(Base, CreatedAtMixin):
    __tablename__ = "goals"

    id: Mapped[str] = mapped_column(String(40), primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    target_amount: Mapped[int] = mapped_column(Integer, nullable=False)
    deadline: Mapped[Optional[date]] = mapped_column(Date)
    icon: Mapped[str] = mapped_column(String(16), nullable=False, default="🎯")
    color: Mapped[str] = mapped_column(String(9), nullable=False, default="#10B981")


class GoalTransaction(Base, CreatedAtMixin):
    __tablename__ = "goal_transactions"

    id: Mapped[str] = mapped_column(String(40), primary_key=True)
    goal_id: Mapped[str] = mapped_column(ForeignKey("goals.id"), nullable=False)
    type: Mapped[GoalTransactionType] = mapped_column(
        GOAL_TRANSACTION_TYPE_ENUM, nullable=False
    )
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    note: Mapped[Optional[str]] = mapped_column(Text)
    wallet_id: Mapped[Optional[str]] = mapped_column(String(40))
    # Weak link to the wallet-side mirror row; absent on legacy rows.
    transaction_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("transactions.id", ondelete="CASCADE")
    )

    __table_args__ = (
        Index("ix_goal_transactions_goal_id", "goal_id"),
        Index("ix_goal_transactions_transaction_id", "transaction_id"),
        CheckConstraint("amount >= 0", name="ck_goal_transactions_amount_positive"),
    )
