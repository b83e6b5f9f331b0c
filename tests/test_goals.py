from datetime import date, datetime

import pytest
from sqlalchemy import create_engine, select
from sqlalchemy.orm import Session

from categories import SystemCategory
from database import Base
from models import GoalTransaction, GoalTransactionType, Transaction, TransactionType
from schemas import GoalIn, GoalTransactionIn, GoalUpdate, TransactionIn, WalletIn
from services import GoalService, NotFoundError, TransactionService, WalletService

NOW = datetime(2026, 3, 10, 9, 0)


def _cash_with_expense(session: Session) -> str:
    cash = WalletService(session).create(
        WalletIn(name="Cash", initial_balance=100_000), now=NOW
    )
    TransactionService(session).create(
        TransactionIn(
            date=date(2026, 3, 10),
            type=TransactionType.expense,
            category="Food & Drinks",
            amount=30_000,
            wallet_id=cash.id,
        ),
        now=NOW,
    )
    return cash.id


def test_topup_from_wallet_writes_linked_pair() -> None:
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)

    with Session(engine) as session:
        cash_id = _cash_with_expense(session)
        goals = GoalService(session)
        laptop = goals.create(GoalIn(name="Laptop", target_amount=1_000_000), now=NOW)

        gtx = goals.topup(
            laptop.id, GoalTransactionIn(amount=200_000, wallet_id=cash_id), now=NOW
        )

        txn = session.get(Transaction, gtx.transaction_id)
        assert txn.type == TransactionType.expense
        assert txn.category == SystemCategory.savings
        assert txn.amount == 200_000
        assert txn.note == "Topup Goal: Laptop"
        assert txn.date == NOW.date()
        assert gtx.note == "Topup"
        assert WalletService(session).get(cash_id).current_balance == -130_000

        progress = goals.get(laptop.id, now=NOW)
        assert progress.current_amount == 200_000
        assert progress.percentage == 20


def test_topup_without_wallet_writes_goal_row_only() -> None:
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)

    with Session(engine) as session:
        goals = GoalService(session)
        trip = goals.create(GoalIn(name="Trip", target_amount=500_000), now=NOW)

        gtx = goals.topup(trip.id, GoalTransactionIn(amount=50_000, note="Gift"), now=NOW)

        assert gtx.transaction_id is None
        assert gtx.note == "Gift"
        assert session.scalars(select(Transaction)).all() == []
        assert goals.current_amount(trip.id) == 50_000


def test_withdraw_more_than_balance_is_rejected() -> None:
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)

    with Session(engine) as session:
        cash_id = _cash_with_expense(session)
        goals = GoalService(session)
        laptop = goals.create(GoalIn(name="Laptop", target_amount=1_000_000), now=NOW)
        goals.topup(laptop.id, GoalTransactionIn(amount=200_000), now=NOW)

        result = goals.withdraw(
            laptop.id, GoalTransactionIn(amount=200_001, wallet_id=cash_id), now=NOW
        )

        assert result is None
        assert goals.current_amount(laptop.id) == 200_000
        assert len(goals.history(laptop.id)) == 1
        assert WalletService(session).get(cash_id).current_balance == 70_000


def test_withdraw_exact_balance_empties_goal() -> None:
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)

    with Session(engine) as session:
        cash_id = _cash_with_expense(session)
        goals = GoalService(session)
        laptop = goals.create(GoalIn(name="Laptop", target_amount=1_000_000), now=NOW)
        goals.topup(
            laptop.id, GoalTransactionIn(amount=200_000, wallet_id=cash_id), now=NOW
        )

        gtx = goals.withdraw(
            laptop.id, GoalTransactionIn(amount=200_000, wallet_id=cash_id), now=NOW
        )

        txn = session.get(Transaction, gtx.transaction_id)
        assert gtx.type == GoalTransactionType.withdraw
        assert txn.type == TransactionType.income
        assert txn.category == SystemCategory.savings_withdrawal
        assert txn.note == "Withdraw Goal: Laptop"
        assert goals.current_amount(laptop.id) == 0
        assert WalletService(session).get(cash_id).current_balance == 70_000


def test_topup_on_missing_goal_is_noop() -> None:
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)

    with Session(engine) as session:
        goals = GoalService(session)

        assert goals.topup("GOAL-missing", GoalTransactionIn(amount=1)) is None
        assert session.scalars(select(GoalTransaction)).all() == []
        with pytest.raises(NotFoundError):
            goals.get("GOAL-missing")


def test_topup_from_unknown_wallet_writes_nothing() -> None:
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)

    with Session(engine) as session:
        goals = GoalService(session)
        laptop = goals.create(GoalIn(name="Laptop", target_amount=1_000), now=NOW)

        with pytest.raises(NotFoundError):
            goals.topup(laptop.id, GoalTransactionIn(amount=10, wallet_id="WALLET-x"))

        assert goals.current_amount(laptop.id) == 0
        assert session.scalars(select(Transaction)).all() == []


def test_percentage_is_capped_and_zero_target_is_zero() -> None:
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)

    with Session(engine) as session:
        goals = GoalService(session)
        small = goals.create(GoalIn(name="Small", target_amount=100), now=NOW)
        free = goals.create(GoalIn(name="Free", target_amount=0), now=NOW)
        third = goals.create(GoalIn(name="Third", target_amount=300), now=NOW)
        goals.topup(small.id, GoalTransactionIn(amount=150), now=NOW)
        goals.topup(free.id, GoalTransactionIn(amount=10), now=NOW)
        goals.topup(third.id, GoalTransactionIn(amount=100), now=NOW)

        assert goals.get(small.id, now=NOW).percentage == 100
        assert goals.get(free.id, now=NOW).percentage == 0
        assert goals.get(third.id, now=NOW).percentage == 33


def test_days_remaining_rounds_up_partial_days() -> None:
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)

    with Session(engine) as session:
        goals = GoalService(session)
        dated = goals.create(
            GoalIn(name="Bike", target_amount=1_000, deadline=date(2026, 3, 12)), now=NOW
        )
        undated = goals.create(GoalIn(name="Rainy day", target_amount=1_000), now=NOW)

        assert goals.get(dated.id, now=datetime(2026, 3, 10, 9, 0)).days_remaining == 2
        assert goals.get(dated.id, now=datetime(2026, 3, 12, 0, 0)).days_remaining == 0
        assert goals.get(dated.id, now=datetime(2026, 3, 13, 9, 0)).days_remaining == -1
        assert goals.get(undated.id, now=NOW).days_remaining is None


def test_delete_goal_removes_history_and_keeps_wallet_rows() -> None:
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)

    with Session(engine) as session:
        cash_id = _cash_with_expense(session)
        goals = GoalService(session)
        laptop = goals.create(GoalIn(name="Laptop", target_amount=1_000_000), now=NOW)
        goals.topup(laptop.id, GoalTransactionIn(amount=10_000, wallet_id=cash_id), now=NOW)
        goals.topup(laptop.id, GoalTransactionIn(amount=20_000), now=NOW)

        assert goals.delete(laptop.id) is True
        assert goals.delete(laptop.id) is False

        assert session.scalars(select(GoalTransaction)).all() == []
        savings = session.scalars(
            select(Transaction).where(Transaction.category == SystemCategory.savings)
        ).all()
        assert len(savings) == 1


def test_update_goal_and_summary() -> None:
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)

    with Session(engine) as session:
        goals = GoalService(session)
        laptop = goals.create(GoalIn(name="Laptop", target_amount=1_000_000), now=NOW)
        phone = goals.create(GoalIn(name="Phone", target_amount=400_000), now=NOW)
        goals.topup(laptop.id, GoalTransactionIn(amount=250_000), now=NOW)
        goals.topup(phone.id, GoalTransactionIn(amount=100_000), now=NOW)

        updated = goals.update(laptop.id, GoalUpdate(target_amount=500_000))
        summary = goals.summary()

        assert updated.percentage == 50
        assert summary.total_saved == 350_000
        assert summary.total_target == 900_000
        assert goals.update("GOAL-missing", GoalUpdate(name="x")) is None


def test_history_is_newest_first_and_paginated() -> None:
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)

    with Session(engine) as session:
        goals = GoalService(session)
        laptop = goals.create(GoalIn(name="Laptop", target_amount=1_000), now=NOW)
        for minute, amount in enumerate([10, 20, 30]):
            goals.topup(
                laptop.id,
                GoalTransactionIn(amount=amount),
                now=datetime(2026, 3, 10, 9, minute),
            )

        assert [g.amount for g in goals.history(laptop.id)] == [30, 20, 10]
        assert [g.amount for g in goals.history(laptop.id, limit=1, offset=1)] == [20]
