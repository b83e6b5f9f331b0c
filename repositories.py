"""
Thin query wrappers, one per table.

Repositories only read and stage writes on the session; committing and every
business rule live in ``services``.
"""

import threading
import time
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional

from sqlalchemy import case, delete, exists, func, select
from sqlalchemy.orm import Session

from categories import SystemCategory
from models import (
    Budget,
    Goal,
    GoalTransaction,
    GoalTransactionType,
    Transaction,
    TransactionType,
    Wallet,
)
from money import to_minor_units

LINK_MATCH_WINDOW = timedelta(seconds=10)

_id_lock = threading.Lock()
_last_issued: dict[str, int] = {}


def generate_id(prefix: str) -> str:
    """Return ``{prefix}-{epoch millis}``, strictly increasing per prefix."""
    stamp = int(time.time() * 1000)
    with _id_lock:
        last = _last_issued.get(prefix, 0)
        if stamp <= last:
            stamp = last + 1
        _last_issued[prefix] = stamp
    return f"{prefix}-{stamp}"


WALLET_BALANCE = func.coalesce(
    func.sum(
        case(
            (Transaction.type == TransactionType.income, Transaction.amount),
            else_=-Transaction.amount,
        )
    ),
    0,
)

GOAL_BALANCE = func.coalesce(
    func.sum(
        case(
            (GoalTransaction.type == GoalTransactionType.topup, GoalTransaction.amount),
            else_=-GoalTransaction.amount,
        )
    ),
    0,
)


def savings_category_for(goal_type: GoalTransactionType) -> str:
    if goal_type == GoalTransactionType.topup:
        return SystemCategory.savings
    return SystemCategory.savings_withdrawal


def goal_type_for(category: str) -> Optional[GoalTransactionType]:
    if category == SystemCategory.savings:
        return GoalTransactionType.topup
    if category == SystemCategory.savings_withdrawal:
        return GoalTransactionType.withdraw
    return None


@dataclass
class TransactionFilters:
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    wallet_id: Optional[str] = None


class WalletRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def find_all(self) -> list[tuple[Wallet, int]]:
        stmt = (
            select(Wallet, WALLET_BALANCE.label("current_balance"))
            .outerjoin(Transaction, Transaction.wallet_id == Wallet.id)
            .group_by(Wallet.id)
            .order_by(Wallet.created_at.desc(), Wallet.id.desc())
        )
        return [(row[0], int(row[1])) for row in self.session.execute(stmt).all()]

    def find_by_id(self, wallet_id: str) -> Optional[Wallet]:
        return self.session.get(Wallet, wallet_id)

    def balance_of(self, wallet_id: str) -> int:
        stmt = select(WALLET_BALANCE).where(Transaction.wallet_id == wallet_id)
        return int(self.session.execute(stmt).scalar_one())

    def count_transactions(self, wallet_id: str) -> int:
        stmt = select(func.count(Transaction.id)).where(
            Transaction.wallet_id == wallet_id
        )
        return int(self.session.execute(stmt).scalar_one() or 0)

    def create(self, wallet: Wallet) -> Wallet:
        self.session.add(wallet)
        self.session.flush()
        return wallet

    def update(self, wallet: Wallet, **fields: object) -> Wallet:
        for key, value in fields.items():
            setattr(wallet, key, value)
        self.session.flush()
        return wallet

    def delete(self, wallet: Wallet) -> None:
        self.session.delete(wallet)
        self.session.flush()

    def is_empty(self) -> bool:
        return self.session.scalar(select(Wallet.id).limit(1)) is None


class TransactionRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    @staticmethod
    def _newest_first(stmt):
        return stmt.order_by(
            Transaction.date.desc(), Transaction.created_at.desc(), Transaction.id.desc()
        )

    def find_by_id(self, transaction_id: str) -> Optional[Transaction]:
        return self.session.get(Transaction, transaction_id)

    def find_all(
        self,
        limit: int = 20,
        offset: int = 0,
        filters: Optional[TransactionFilters] = None,
    ) -> list[Transaction]:
        filters = filters or TransactionFilters()
        stmt = select(Transaction)
        if filters.start_date and filters.end_date:
            stmt = stmt.where(
                Transaction.date.between(filters.start_date, filters.end_date)
            )
        if filters.wallet_id:
            stmt = stmt.where(Transaction.wallet_id == filters.wallet_id)
        stmt = self._newest_first(stmt).limit(limit).offset(offset)
        return list(self.session.scalars(stmt).all())

    def get_all(self) -> list[Transaction]:
        return list(self.session.scalars(self._newest_first(select(Transaction))).all())

    def between(self, start: date, end: date) -> list[Transaction]:
        stmt = self._newest_first(
            select(Transaction).where(Transaction.date.between(start, end))
        )
        return list(self.session.scalars(stmt).all())

    def find_legacy_link(self, gtx: GoalTransaction) -> Optional[Transaction]:
        """Best-effort match for a goal transaction created before linking."""
        if not gtx.wallet_id:
            return None
        already_linked = exists().where(GoalTransaction.transaction_id == Transaction.id)
        stmt = (
            select(Transaction)
            .where(
                Transaction.wallet_id == gtx.wallet_id,
                Transaction.category == savings_category_for(gtx.type),
                Transaction.created_at.between(
                    gtx.created_at - LINK_MATCH_WINDOW,
                    gtx.created_at + LINK_MATCH_WINDOW,
                ),
                ~already_linked,
            )
            .order_by(Transaction.created_at.asc(), Transaction.id.asc())
            .limit(1)
        )
        return self.session.scalar(stmt)

    def create(self, txn: Transaction) -> Transaction:
        txn.amount = to_minor_units(txn.amount)
        self.session.add(txn)
        self.session.flush()
        return txn

    def update(self, txn: Transaction, **fields: object) -> Transaction:
        for key, value in fields.items():
            if key == "amount" and value is not None:
                value = to_minor_units(value)
            setattr(txn, key, value)
        self.session.flush()
        return txn

    def delete(self, txn: Transaction) -> None:
        self.session.delete(txn)
        self.session.flush()


class GoalRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def _with_amount(self):
        return (
            select(Goal, GOAL_BALANCE.label("current_amount"))
            .outerjoin(GoalTransaction, GoalTransaction.goal_id == Goal.id)
            .group_by(Goal.id)
        )

    def find_all(self) -> list[tuple[Goal, int]]:
        stmt = self._with_amount().order_by(Goal.created_at.desc(), Goal.id.desc())
        return [(row[0], int(row[1])) for row in self.session.execute(stmt).all()]

    def find_by_id(self, goal_id: str) -> Optional[tuple[Goal, int]]:
        row = self.session.execute(
            self._with_amount().where(Goal.id == goal_id)
        ).first()
        if row is None:
            return None
        return row[0], int(row[1])

    def current_amount(self, goal_id: str) -> int:
        stmt = select(GOAL_BALANCE).where(GoalTransaction.goal_id == goal_id)
        return int(self.session.execute(stmt).scalar_one())

    def create(self, goal: Goal) -> Goal:
        goal.target_amount = to_minor_units(goal.target_amount)
        self.session.add(goal)
        self.session.flush()
        return goal

    def update(self, goal: Goal, **fields: object) -> Goal:
        for key, value in fields.items():
            if key == "target_amount" and value is not None:
                value = to_minor_units(value)
            setattr(goal, key, value)
        self.session.flush()
        return goal

    def delete(self, goal: Goal) -> None:
        self.session.delete(goal)
        self.session.flush()


class GoalTransactionRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def find_by_goal_id(
        self, goal_id: str, limit: int = 20, offset: int = 0
    ) -> list[GoalTransaction]:
        stmt = (
            select(GoalTransaction)
            .where(GoalTransaction.goal_id == goal_id)
            .order_by(GoalTransaction.created_at.desc(), GoalTransaction.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(self.session.scalars(stmt).all())

    def find_by_id(self, gtx_id: str) -> Optional[GoalTransaction]:
        return self.session.get(GoalTransaction, gtx_id)

    def find_by_transaction_id(self, transaction_id: str) -> Optional[GoalTransaction]:
        return self.session.scalar(
            select(GoalTransaction)
            .where(GoalTransaction.transaction_id == transaction_id)
            .limit(1)
        )

    def find_by_fuzzy(
        self, wallet_id: str, goal_type: GoalTransactionType, timestamp: datetime
    ) -> Optional[GoalTransaction]:
        stmt = (
            select(GoalTransaction)
            .where(
                GoalTransaction.wallet_id == wallet_id,
                GoalTransaction.type == goal_type,
                GoalTransaction.transaction_id.is_(None),
                GoalTransaction.created_at.between(
                    timestamp - LINK_MATCH_WINDOW, timestamp + LINK_MATCH_WINDOW
                ),
            )
            .order_by(GoalTransaction.created_at.asc(), GoalTransaction.id.asc())
            .limit(1)
        )
        return self.session.scalar(stmt)

    def find_unlinked(self) -> list[GoalTransaction]:
        stmt = (
            select(GoalTransaction)
            .where(
                GoalTransaction.transaction_id.is_(None),
                GoalTransaction.wallet_id.is_not(None),
            )
            .order_by(GoalTransaction.created_at.asc(), GoalTransaction.id.asc())
        )
        return list(self.session.scalars(stmt).all())

    def create(self, gtx: GoalTransaction) -> GoalTransaction:
        gtx.amount = to_minor_units(gtx.amount)
        self.session.add(gtx)
        self.session.flush()
        return gtx

    def update(self, gtx: GoalTransaction, **fields: object) -> GoalTransaction:
        for key, value in fields.items():
            if key == "amount" and value is not None:
                value = to_minor_units(value)
            setattr(gtx, key, value)
        self.session.flush()
        return gtx

    def delete(self, gtx: GoalTransaction) -> None:
        self.session.delete(gtx)
        self.session.flush()

    def delete_by_goal_id(self, goal_id: str) -> int:
        result = self.session.execute(
            delete(GoalTransaction).where(GoalTransaction.goal_id == goal_id)
        )
        self.session.flush()
        return int(result.rowcount or 0)


class BudgetRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def find_all(self) -> list[Budget]:
        return list(self.session.scalars(select(Budget).order_by(Budget.id)).all())

    def find_by_category(self, category: str) -> Optional[Budget]:
        return self.session.scalar(select(Budget).where(Budget.category == category))

    def upsert(self, category: str, monthly_limit: int) -> Budget:
        budget = self.find_by_category(category)
        if budget is None:
            budget = Budget(category=category, monthly_limit=0)
            self.session.add(budget)
        budget.monthly_limit = to_minor_units(monthly_limit)
        self.session.flush()
        return budget

    def delete(self, budget: Budget) -> None:
        self.session.delete(budget)
        self.session.flush()

    def is_empty(self) -> bool:
        return self.session.scalar(select(Budget.id).limit(1)) is None
