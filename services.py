from __future__ import annotations

import logging
import math
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import date, datetime, time
from decimal import ROUND_FLOOR, Decimal
from typing import Iterator, Optional
from zoneinfo import ZoneInfo

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from categories import (
    DEFAULT_BUDGETS,
    DEFAULT_WALLETS,
    SystemCategory,
    color_for,
    is_savings_category,
)
from config import get_settings
from models import (
    Budget,
    Goal,
    GoalTransaction,
    GoalTransactionType,
    Transaction,
    TransactionType,
    Wallet,
    WalletType,
)
from money import format_rupiah, to_minor_units
from periods import days_in_month, is_same_month, month_bounds
from repositories import (
    BudgetRepository,
    GoalRepository,
    GoalTransactionRepository,
    TransactionFilters,
    TransactionRepository,
    WalletRepository,
    generate_id,
    goal_type_for,
    savings_category_for,
)
from schemas import (
    BudgetIn,
    GoalIn,
    GoalTransactionIn,
    GoalTransactionUpdate,
    GoalUpdate,
    TransactionIn,
    TransactionUpdate,
    TransferIn,
    WalletIn,
    WalletUpdate,
)

logger = logging.getLogger(__name__)

RECENT_TRANSACTIONS = 5


class NotFoundError(ValueError):
    pass


def local_now() -> datetime:
    tz = ZoneInfo(get_settings().timezone)
    return datetime.now(tz).replace(tzinfo=None)


def local_today() -> date:
    return local_now().date()


def percent_of(part: int, whole: int) -> int:
    if whole <= 0:
        return 0
    ratio = Decimal(part) * 100 / Decimal(whole)
    # Halves round toward positive infinity: 2.5 -> 3, -2.5 -> -2.
    return int((ratio + Decimal("0.5")).to_integral_value(rounding=ROUND_FLOOR))


@contextmanager
def writing(session: Session, event: str) -> Iterator[None]:
    """Commit everything staged inside the block as one unit, or nothing."""
    try:
        yield
        session.commit()
    except SQLAlchemyError:
        session.rollback()
        logger.exception(f"{event}: store write failed, rolled back")
        raise


@dataclass(frozen=True)
class WalletBalance:
    id: str
    name: str
    type: WalletType
    icon: str
    color: str
    created_at: datetime
    current_balance: int

    @classmethod
    def from_row(cls, wallet: Wallet, balance: int) -> "WalletBalance":
        return cls(
            id=wallet.id,
            name=wallet.name,
            type=wallet.type,
            icon=wallet.icon,
            color=wallet.color,
            created_at=wallet.created_at,
            current_balance=balance,
        )


@dataclass(frozen=True)
class GoalProgress:
    id: str
    name: str
    target_amount: int
    deadline: Optional[date]
    icon: str
    color: str
    created_at: datetime
    current_amount: int
    percentage: int
    days_remaining: Optional[int]

    @classmethod
    def from_row(cls, goal: Goal, current: int, now: datetime) -> "GoalProgress":
        percentage = (
            min(100, percent_of(current, goal.target_amount))
            if goal.target_amount > 0
            else 0
        )
        days_remaining = None
        if goal.deadline is not None:
            delta = datetime.combine(goal.deadline, time.min) - now
            days_remaining = math.ceil(delta.total_seconds() / 86400)
        return cls(
            id=goal.id,
            name=goal.name,
            target_amount=goal.target_amount,
            deadline=goal.deadline,
            icon=goal.icon,
            color=goal.color,
            created_at=goal.created_at,
            current_amount=current,
            percentage=percentage,
            days_remaining=days_remaining,
        )


@dataclass(frozen=True)
class GoalSummary:
    total_saved: int
    total_target: int


@dataclass(frozen=True)
class BudgetStatus:
    id: int
    category: str
    monthly_limit: int
    spent: int
    remaining: int
    percentage: int  # capped at 100
    raw_percentage: int
    over_budget: bool

    @classmethod
    def from_row(cls, budget: Budget, spent: int) -> "BudgetStatus":
        raw = percent_of(spent, budget.monthly_limit)
        return cls(
            id=budget.id,
            category=budget.category,
            monthly_limit=budget.monthly_limit,
            spent=spent,
            remaining=budget.monthly_limit - spent,
            percentage=min(raw, 100),
            raw_percentage=raw,
            over_budget=spent > budget.monthly_limit,
        )


@dataclass(frozen=True)
class CategorySlice:
    label: str
    value: int
    color: str


@dataclass
class Dashboard:
    balance: int
    total_income: int
    total_expense: int
    savings_rate: int
    budget_overview: list[BudgetStatus] = field(default_factory=list)
    category_breakdown: list[CategorySlice] = field(default_factory=list)
    recent_transactions: list[Transaction] = field(default_factory=list)


@dataclass
class MonthlyReport:
    month: int
    year: int
    total_income: int
    total_expense: int
    net: int
    daily_expenses: list[int]
    category_breakdown: list[CategorySlice]


def _breakdown(totals: dict[str, int]) -> list[CategorySlice]:
    return [
        CategorySlice(label=label, value=value, color=color_for(label))
        for label, value in totals.items()
    ]


def _signed(goal_type: GoalTransactionType, amount: int) -> int:
    return amount if goal_type == GoalTransactionType.topup else -amount


class LinkService:
    """Resolves and maintains the goal transaction <-> wallet transaction pair."""

    def __init__(self, session: Session) -> None:
        self.session = session
        self.transactions = TransactionRepository(session)
        self.goal_transactions = GoalTransactionRepository(session)

    def transaction_for(self, gtx: GoalTransaction) -> Optional[Transaction]:
        if gtx.transaction_id:
            return self.transactions.find_by_id(gtx.transaction_id)
        return self.transactions.find_legacy_link(gtx)

    def goal_transaction_for(self, txn: Transaction) -> Optional[GoalTransaction]:
        linked = self.goal_transactions.find_by_transaction_id(txn.id)
        if linked is not None:
            return linked
        goal_type = goal_type_for(txn.category)
        if goal_type is None or not txn.wallet_id:
            return None
        return self.goal_transactions.find_by_fuzzy(
            txn.wallet_id, goal_type, txn.created_at
        )

    def delete_pair(self, gtx: GoalTransaction, txn: Optional[Transaction]) -> None:
        # The goal side goes first: it holds the foreign key to the transaction.
        self.goal_transactions.delete(gtx)
        if txn is not None:
            self.transactions.delete(txn)

    def backfill(self) -> int:
        linked = 0
        with writing(self.session, "link_backfill"):
            for gtx in self.goal_transactions.find_unlinked():
                txn = self.transactions.find_legacy_link(gtx)
                if txn is None:
                    continue
                self.goal_transactions.update(gtx, transaction_id=txn.id)
                linked += 1
        logger.info(f"link_backfill: linked={linked}")
        return linked


class WalletService:
    def __init__(self, session: Session) -> None:
        self.session = session
        self.wallets = WalletRepository(session)
        self.transactions = TransactionRepository(session)

    def list_all(self) -> list[WalletBalance]:
        return [WalletBalance.from_row(w, b) for w, b in self.wallets.find_all()]

    def get(self, wallet_id: str) -> WalletBalance:
        wallet = self.wallets.find_by_id(wallet_id)
        if not wallet:
            raise NotFoundError("Wallet not found")
        return WalletBalance.from_row(wallet, self.wallets.balance_of(wallet_id))

    def net_worth(self) -> int:
        return sum(w.current_balance for w in self.list_all())

    def create(self, data: WalletIn, *, now: Optional[datetime] = None) -> WalletBalance:
        now = now or local_now()
        wallet = Wallet(
            id=generate_id("WALLET"),
            name=data.name.strip(),
            type=data.type,
            icon=data.icon,
            color=data.color,
            created_at=now,
        )
        with writing(self.session, "wallet_create"):
            self.wallets.create(wallet)
            if data.initial_balance > 0:
                self.transactions.create(
                    Transaction(
                        id=generate_id("TRX"),
                        date=now.date(),
                        type=TransactionType.income,
                        category=SystemCategory.initial_balance,
                        amount=data.initial_balance,
                        note=None,
                        wallet_id=wallet.id,
                        created_at=now,
                    )
                )
        logger.info(
            f"wallet_create: wallet_id={wallet.id} "
            f"initial_balance={data.initial_balance}"
        )
        return self.get(wallet.id)

    def update(self, wallet_id: str, data: WalletUpdate) -> Optional[WalletBalance]:
        wallet = self.wallets.find_by_id(wallet_id)
        if not wallet:
            return None
        changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
        if "name" in changes:
            changes["name"] = changes["name"].strip()
        with writing(self.session, "wallet_update"):
            self.wallets.update(wallet, **changes)
        return self.get(wallet_id)

    def delete(self, wallet_id: str) -> bool:
        wallet = self.wallets.find_by_id(wallet_id)
        if not wallet:
            return False
        if self.wallets.count_transactions(wallet_id) > 0:
            logger.info(f"wallet_delete_refused: wallet_id={wallet_id} has_transactions=1")
            return False
        with writing(self.session, "wallet_delete"):
            self.wallets.delete(wallet)
        logger.info(f"wallet_delete: wallet_id={wallet_id}")
        return True

    def transfer(
        self, data: TransferIn, *, now: Optional[datetime] = None
    ) -> tuple[Transaction, Transaction]:
        for wallet_id in (data.from_wallet_id, data.to_wallet_id):
            if not self.wallets.find_by_id(wallet_id):
                raise NotFoundError("Wallet not found")
        now = now or local_now()
        txn_date = data.date or now.date()
        note = data.note or "Transfer between wallets"
        outgoing = Transaction(
            id=generate_id("TRX"),
            date=txn_date,
            type=TransactionType.expense,
            category=SystemCategory.transfer_out,
            amount=data.amount,
            note=note,
            wallet_id=data.from_wallet_id,
            created_at=now,
        )
        incoming = Transaction(
            id=generate_id("TRX"),
            date=txn_date,
            type=TransactionType.income,
            category=SystemCategory.transfer_in,
            amount=data.amount,
            note=note,
            wallet_id=data.to_wallet_id,
            created_at=now,
        )
        with writing(self.session, "wallet_transfer"):
            self.transactions.create(outgoing)
            self.transactions.create(incoming)
        logger.info(
            f"wallet_transfer: from={data.from_wallet_id} to={data.to_wallet_id} "
            f"amount={data.amount}"
        )
        return outgoing, incoming


class TransactionService:
    def __init__(self, session: Session) -> None:
        self.session = session
        self.transactions = TransactionRepository(session)
        self.wallets = WalletRepository(session)
        self.goals = GoalRepository(session)
        self.goal_transactions = GoalTransactionRepository(session)
        self.links = LinkService(session)

    def _require_wallet(self, wallet_id: Optional[str]) -> None:
        if wallet_id and not self.wallets.find_by_id(wallet_id):
            raise NotFoundError("Wallet not found")

    def get(self, transaction_id: str) -> Transaction:
        txn = self.transactions.find_by_id(transaction_id)
        if not txn:
            raise NotFoundError("Transaction not found")
        return txn

    def list(
        self,
        limit: int = 20,
        offset: int = 0,
        filters: Optional[TransactionFilters] = None,
    ) -> list[Transaction]:
        return self.transactions.find_all(limit=limit, offset=offset, filters=filters)

    def has_sufficient_balance(self, wallet_id: str, amount: int) -> bool:
        return self.wallets.balance_of(wallet_id) >= amount

    def create(self, data: TransactionIn, *, now: Optional[datetime] = None) -> Transaction:
        self._require_wallet(data.wallet_id)
        txn = Transaction(
            id=generate_id("TRX"),
            date=data.date,
            type=data.type,
            category=data.category.strip(),
            amount=data.amount,
            note=data.note or None,
            wallet_id=data.wallet_id or None,
            created_at=now or local_now(),
        )
        with writing(self.session, "transaction_create"):
            self.transactions.create(txn)
        logger.info(
            f"transaction_create: transaction_id={txn.id} type={txn.type.value} "
            f"amount={txn.amount}"
        )
        return txn

    def update(
        self, transaction_id: str, data: TransactionUpdate
    ) -> Optional[Transaction]:
        txn = self.transactions.find_by_id(transaction_id)
        if not txn:
            return None
        changes = data.model_dump(exclude_unset=True)
        for required in ("date", "type", "category", "amount"):
            if changes.get(required, 0) is None:
                changes.pop(required)
        if "category" in changes:
            changes["category"] = changes["category"].strip()
        if "wallet_id" in changes:
            changes["wallet_id"] = changes["wallet_id"] or None
            self._require_wallet(changes["wallet_id"])

        mirrored = {k: changes[k] for k in ("amount", "note") if k in changes}
        gtx = None
        if mirrored and is_savings_category(txn.category):
            gtx = self.links.goal_transaction_for(txn)
        if gtx is not None and "amount" in mirrored:
            current = self.goals.current_amount(gtx.goal_id)
            after = current - _signed(gtx.type, gtx.amount) + _signed(
                gtx.type, to_minor_units(mirrored["amount"])
            )
            if after < 0:
                logger.info(
                    f"transaction_update_rejected: transaction_id={txn.id} "
                    f"goal_id={gtx.goal_id} goal_balance_after={after}"
                )
                return None

        with writing(self.session, "transaction_update"):
            self.transactions.update(txn, **changes)
            if gtx is not None:
                self.goal_transactions.update(gtx, **mirrored)
        logger.info(
            f"transaction_update: transaction_id={txn.id} "
            f"linked_goal_transaction_id={gtx.id if gtx else None}"
        )
        return txn

    def delete(self, transaction_id: str) -> bool:
        txn = self.transactions.find_by_id(transaction_id)
        if not txn:
            return False
        gtx = None
        if is_savings_category(txn.category):
            gtx = self.links.goal_transaction_for(txn)
        with writing(self.session, "transaction_delete"):
            if gtx is not None:
                self.links.delete_pair(gtx, txn)
            else:
                self.transactions.delete(txn)
        logger.info(
            f"transaction_delete: transaction_id={transaction_id} "
            f"linked_goal_transaction_id={gtx.id if gtx else None}"
        )
        return True


class GoalService:
    def __init__(self, session: Session) -> None:
        self.session = session
        self.goals = GoalRepository(session)
        self.goal_transactions = GoalTransactionRepository(session)
        self.transactions = TransactionRepository(session)
        self.wallets = WalletRepository(session)
        self.links = LinkService(session)

    def list_all(self, *, now: Optional[datetime] = None) -> list[GoalProgress]:
        now = now or local_now()
        return [GoalProgress.from_row(g, c, now) for g, c in self.goals.find_all()]

    def get(self, goal_id: str, *, now: Optional[datetime] = None) -> GoalProgress:
        found = self.goals.find_by_id(goal_id)
        if not found:
            raise NotFoundError("Goal not found")
        goal, current = found
        return GoalProgress.from_row(goal, current, now or local_now())

    def current_amount(self, goal_id: str) -> int:
        return self.goals.current_amount(goal_id)

    def summary(self) -> GoalSummary:
        rows = self.goals.find_all()
        return GoalSummary(
            total_saved=sum(current for _, current in rows),
            total_target=sum(goal.target_amount for goal, _ in rows),
        )

    def create(self, data: GoalIn, *, now: Optional[datetime] = None) -> GoalProgress:
        now = now or local_now()
        goal = Goal(
            id=generate_id("GOAL"),
            name=data.name.strip(),
            target_amount=data.target_amount,
            deadline=data.deadline,
            icon=data.icon,
            color=data.color,
            created_at=now,
        )
        with writing(self.session, "goal_create"):
            self.goals.create(goal)
        logger.info(f"goal_create: goal_id={goal.id} target={goal.target_amount}")
        return self.get(goal.id, now=now)

    def update(self, goal_id: str, data: GoalUpdate) -> Optional[GoalProgress]:
        found = self.goals.find_by_id(goal_id)
        if not found:
            return None
        goal, _ = found
        changes = data.model_dump(exclude_unset=True)
        for required in ("name", "target_amount", "icon", "color"):
            if changes.get(required, "") is None:
                changes.pop(required)
        with writing(self.session, "goal_update"):
            self.goals.update(goal, **changes)
        return self.get(goal_id)

    def delete(self, goal_id: str) -> bool:
        found = self.goals.find_by_id(goal_id)
        if not found:
            return False
        goal, _ = found
        with writing(self.session, "goal_delete"):
            removed = self.goal_transactions.delete_by_goal_id(goal_id)
            self.goals.delete(goal)
        logger.info(f"goal_delete: goal_id={goal_id} goal_transactions_removed={removed}")
        return True

    def history(
        self, goal_id: str, limit: int = 20, offset: int = 0
    ) -> list[GoalTransaction]:
        return self.goal_transactions.find_by_goal_id(goal_id, limit, offset)

    def get_transaction(self, gtx_id: str) -> GoalTransaction:
        gtx = self.goal_transactions.find_by_id(gtx_id)
        if not gtx:
            raise NotFoundError("Goal transaction not found")
        return gtx

    def topup(
        self, goal_id: str, data: GoalTransactionIn, *, now: Optional[datetime] = None
    ) -> Optional[GoalTransaction]:
        return self._move(goal_id, GoalTransactionType.topup, data, now)

    def withdraw(
        self, goal_id: str, data: GoalTransactionIn, *, now: Optional[datetime] = None
    ) -> Optional[GoalTransaction]:
        return self._move(goal_id, GoalTransactionType.withdraw, data, now)

    def _move(
        self,
        goal_id: str,
        goal_type: GoalTransactionType,
        data: GoalTransactionIn,
        now: Optional[datetime],
    ) -> Optional[GoalTransaction]:
        found = self.goals.find_by_id(goal_id)
        if not found:
            logger.info(f"goal_{goal_type.value}_skipped: goal_id={goal_id} reason=not_found")
            return None
        goal, current = found
        amount = to_minor_units(data.amount)
        if goal_type == GoalTransactionType.withdraw and amount > current:
            logger.info(
                f"goal_withdraw_rejected: goal_id={goal_id} "
                f"requested={format_rupiah(amount)} available={format_rupiah(current)}"
            )
            return None
        if data.wallet_id and not self.wallets.find_by_id(data.wallet_id):
            raise NotFoundError("Wallet not found")

        now = now or local_now()
        is_topup = goal_type == GoalTransactionType.topup
        with writing(self.session, f"goal_{goal_type.value}"):
            transaction_id = None
            if data.wallet_id:
                txn = self.transactions.create(
                    Transaction(
                        id=generate_id("TRX"),
                        date=now.date(),
                        type=TransactionType.expense if is_topup else TransactionType.income,
                        category=savings_category_for(goal_type),
                        amount=amount,
                        note=f"{'Topup' if is_topup else 'Withdraw'} Goal: {goal.name}",
                        wallet_id=data.wallet_id,
                        created_at=now,
                    )
                )
                transaction_id = txn.id
            gtx = self.goal_transactions.create(
                GoalTransaction(
                    id=generate_id("GTX"),
                    goal_id=goal_id,
                    type=goal_type,
                    amount=amount,
                    note=data.note or ("Topup" if is_topup else "Withdraw"),
                    wallet_id=data.wallet_id,
                    created_at=now,
                    transaction_id=transaction_id,
                )
            )
        logger.info(
            f"goal_{goal_type.value}: goal_id={goal_id} amount={amount} "
            f"transaction_id={transaction_id}"
        )
        return gtx

    def update_transaction(
        self, gtx_id: str, data: GoalTransactionUpdate
    ) -> Optional[GoalTransaction]:
        gtx = self.goal_transactions.find_by_id(gtx_id)
        if not gtx:
            return None
        changes = data.model_dump(exclude_unset=True)
        if changes.get("amount", 0) is None:
            changes.pop("amount")
        if not changes:
            return gtx
        if "amount" in changes:
            current = self.goals.current_amount(gtx.goal_id)
            after = current - _signed(gtx.type, gtx.amount) + _signed(
                gtx.type, to_minor_units(changes["amount"])
            )
            if after < 0:
                logger.info(
                    f"goal_transaction_update_rejected: goal_transaction_id={gtx_id} "
                    f"goal_balance_after={after}"
                )
                return None

        txn = self.links.transaction_for(gtx)
        with writing(self.session, "goal_transaction_update"):
            self.goal_transactions.update(gtx, **changes)
            if txn is not None:
                self.transactions.update(txn, **changes)
        logger.info(
            f"goal_transaction_update: goal_transaction_id={gtx_id} "
            f"linked_transaction_id={txn.id if txn else None}"
        )
        return gtx

    def delete_transaction(self, gtx_id: str) -> bool:
        gtx = self.goal_transactions.find_by_id(gtx_id)
        if not gtx:
            return False
        txn = self.links.transaction_for(gtx)
        linked_id = txn.id if txn else None
        with writing(self.session, "goal_transaction_delete"):
            self.links.delete_pair(gtx, txn)
        logger.info(
            f"goal_transaction_delete: goal_transaction_id={gtx_id} "
            f"linked_transaction_id={linked_id}"
        )
        return True


class BudgetService:
    def __init__(self, session: Session) -> None:
        self.session = session
        self.budgets = BudgetRepository(session)

    def spent_by_category_for_month(self, year: int, month: int) -> dict[str, int]:
        start, end = month_bounds(year, month)
        stmt = (
            select(
                Transaction.category,
                func.coalesce(func.sum(Transaction.amount), 0).label("spent"),
            )
            .where(
                Transaction.type == TransactionType.expense,
                Transaction.date.between(start, end),
            )
            .group_by(Transaction.category)
        )
        return {row.category: int(row.spent or 0) for row in self.session.execute(stmt)}

    def list_with_progress(self, *, today: Optional[date] = None) -> list[BudgetStatus]:
        today = today or local_today()
        spent = self.spent_by_category_for_month(today.year, today.month)
        return [
            BudgetStatus.from_row(budget, spent.get(budget.category, 0))
            for budget in self.budgets.find_all()
        ]

    def set_limit(self, data: BudgetIn) -> Budget:
        with writing(self.session, "budget_set_limit"):
            budget = self.budgets.upsert(data.category.strip(), data.monthly_limit)
        logger.info(
            f"budget_set_limit: category={budget.category} limit={budget.monthly_limit}"
        )
        return budget

    def delete(self, category: str) -> bool:
        budget = self.budgets.find_by_category(category)
        if not budget:
            return False
        with writing(self.session, "budget_delete"):
            self.budgets.delete(budget)
        return True


class DashboardService:
    def __init__(self, session: Session) -> None:
        self.session = session

    def build(self, *, today: Optional[date] = None) -> Dashboard:
        today = today or local_today()
        transactions = TransactionRepository(self.session).get_all()
        budgets = BudgetRepository(self.session).find_all()
        wallets = WalletService(self.session).list_all()

        total_income = 0
        total_expense = 0
        category_totals: dict[str, int] = {}
        for txn in transactions:
            if not is_same_month(txn.date, today):
                continue
            if txn.type == TransactionType.income:
                total_income += txn.amount
            else:
                total_expense += txn.amount
                category_totals[txn.category] = (
                    category_totals.get(txn.category, 0) + txn.amount
                )

        savings_rate = (
            percent_of(total_income - total_expense, total_income)
            if total_income > 0
            else 0
        )
        budget_overview = sorted(
            (
                BudgetStatus.from_row(b, category_totals.get(b.category, 0))
                for b in budgets
            ),
            key=lambda status: status.percentage,
            reverse=True,
        )
        return Dashboard(
            balance=sum(w.current_balance for w in wallets),
            total_income=total_income,
            total_expense=total_expense,
            savings_rate=savings_rate,
            budget_overview=budget_overview,
            category_breakdown=_breakdown(category_totals),
            recent_transactions=transactions[:RECENT_TRANSACTIONS],
        )


class ReportService:
    def __init__(self, session: Session) -> None:
        self.session = session

    def monthly_report(self, month: int, year: int) -> MonthlyReport:
        start, end = month_bounds(year, month)
        transactions = TransactionRepository(self.session).between(start, end)

        total_income = 0
        total_expense = 0
        daily = [0] * days_in_month(year, month)
        category_totals: dict[str, int] = {}
        for txn in transactions:
            if txn.type == TransactionType.income:
                total_income += txn.amount
                continue
            total_expense += txn.amount
            daily[txn.date.day - 1] += txn.amount
            category_totals[txn.category] = (
                category_totals.get(txn.category, 0) + txn.amount
            )

        breakdown = sorted(
            _breakdown(category_totals), key=lambda s: s.value, reverse=True
        )
        return MonthlyReport(
            month=month,
            year=year,
            total_income=total_income,
            total_expense=total_expense,
            net=total_income - total_expense,
            daily_expenses=daily,
            category_breakdown=breakdown,
        )


def seed_defaults(session: Session) -> None:
    wallets = WalletRepository(session)
    budgets = BudgetRepository(session)
    with writing(session, "seed_defaults"):
        seeded_wallets = 0
        if wallets.is_empty():
            for row in DEFAULT_WALLETS:
                wallets.create(Wallet(**{**row, "type": WalletType(row["type"])}))
                seeded_wallets += 1
        seeded_budgets = 0
        if budgets.is_empty():
            for category, limit in DEFAULT_BUDGETS:
                budgets.upsert(category, limit)
                seeded_budgets += 1
    logger.info(f"seed_defaults: wallets={seeded_wallets} budgets={seeded_budgets}")
