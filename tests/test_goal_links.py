from datetime import date, datetime, timedelta

from sqlalchemy import create_engine, select
from sqlalchemy.orm import Session

from categories import SystemCategory
from database import Base
from models import (
    Goal,
    GoalTransaction,
    GoalTransactionType,
    Transaction,
    TransactionType,
    Wallet,
    WalletType,
)
from schemas import (
    GoalIn,
    GoalTransactionIn,
    GoalTransactionUpdate,
    TransactionIn,
    TransactionUpdate,
    WalletIn,
)
from services import GoalService, LinkService, TransactionService, WalletService

NOW = datetime(2026, 3, 10, 9, 0)


def _laptop_with_topup(session: Session):
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
    goals = GoalService(session)
    laptop = goals.create(GoalIn(name="Laptop", target_amount=1_000_000), now=NOW)
    gtx = goals.topup(
        laptop.id, GoalTransactionIn(amount=200_000, wallet_id=cash.id), now=NOW
    )
    return cash.id, laptop.id, gtx


def _legacy_pair(session: Session, offset: timedelta):
    """Write a goal topup and its wallet row the way pre-link versions did."""
    session.add(Wallet(id="WALLET-CASH", name="Cash", type=WalletType.cash))
    session.add(Goal(id="GOAL-1", name="Laptop", target_amount=1_000_000))
    session.add(
        Transaction(
            id="TRX-1",
            date=NOW.date(),
            type=TransactionType.expense,
            category=SystemCategory.savings,
            amount=50_000,
            note="Topup Goal: Laptop",
            wallet_id="WALLET-CASH",
            created_at=NOW + offset,
        )
    )
    session.add(
        GoalTransaction(
            id="GTX-1",
            goal_id="GOAL-1",
            type=GoalTransactionType.topup,
            amount=50_000,
            note="Topup",
            wallet_id="WALLET-CASH",
            created_at=NOW,
        )
    )
    session.commit()


def test_goal_side_amount_edit_mirrors_to_wallet_row() -> None:
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)

    with Session(engine) as session:
        cash_id, goal_id, gtx = _laptop_with_topup(session)

        GoalService(session).update_transaction(
            gtx.id, GoalTransactionUpdate(amount=150_000, note="Adjusted")
        )

        txn = session.get(Transaction, gtx.transaction_id)
        assert txn.amount == 150_000
        assert txn.note == "Adjusted"
        assert GoalService(session).current_amount(goal_id) == 150_000
        assert WalletService(session).get(cash_id).current_balance == -80_000


def test_wallet_side_edit_mirrors_amount_and_note_only() -> None:
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)

    with Session(engine) as session:
        _, goal_id, gtx = _laptop_with_topup(session)

        TransactionService(session).update(
            gtx.transaction_id,
            TransactionUpdate(amount=120_000, note="Edited", date=date(2026, 3, 1)),
        )

        session.refresh(gtx)
        assert gtx.amount == 120_000
        assert gtx.note == "Edited"
        assert gtx.created_at == NOW
        assert GoalService(session).current_amount(goal_id) == 120_000


def test_wallet_side_date_edit_does_not_touch_goal_row() -> None:
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)

    with Session(engine) as session:
        _, _, gtx = _laptop_with_topup(session)

        TransactionService(session).update(
            gtx.transaction_id, TransactionUpdate(date=date(2026, 2, 28))
        )

        session.refresh(gtx)
        assert gtx.amount == 200_000
        assert gtx.note == "Topup"


def test_amendment_that_would_overdraw_goal_is_rejected() -> None:
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)

    with Session(engine) as session:
        cash_id, goal_id, gtx = _laptop_with_topup(session)
        goals = GoalService(session)
        goals.withdraw(
            goal_id, GoalTransactionIn(amount=150_000, wallet_id=cash_id), now=NOW
        )

        assert goals.update_transaction(gtx.id, GoalTransactionUpdate(amount=100_000)) is None
        assert (
            TransactionService(session).update(
                gtx.transaction_id, TransactionUpdate(amount=100_000)
            )
            is None
        )
        assert goals.current_amount(goal_id) == 50_000
        assert session.get(Transaction, gtx.transaction_id).amount == 200_000


def test_deleting_goal_transaction_deletes_wallet_row() -> None:
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)

    with Session(engine) as session:
        cash_id, goal_id, gtx = _laptop_with_topup(session)
        txn_id = gtx.transaction_id

        assert GoalService(session).delete_transaction(gtx.id) is True

        assert session.get(Transaction, txn_id) is None
        assert GoalService(session).current_amount(goal_id) == 0
        assert WalletService(session).get(cash_id).current_balance == 70_000


def test_deleting_wallet_row_deletes_goal_transaction() -> None:
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)

    with Session(engine) as session:
        _, goal_id, gtx = _laptop_with_topup(session)
        gtx_id = gtx.id

        assert TransactionService(session).delete(gtx.transaction_id) is True

        assert session.get(GoalTransaction, gtx_id) is None
        assert GoalService(session).current_amount(goal_id) == 0


def test_deleting_unmatched_savings_transaction_removes_only_it() -> None:
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)

    with Session(engine) as session:
        cash_id, goal_id, _ = _laptop_with_topup(session)
        stray = TransactionService(session).create(
            TransactionIn(
                date=date(2026, 3, 11),
                type=TransactionType.expense,
                category=SystemCategory.savings,
                amount=5_000,
                wallet_id=cash_id,
            ),
            now=NOW + timedelta(hours=1),
        )

        assert TransactionService(session).delete(stray.id) is True

        assert session.get(Transaction, stray.id) is None
        assert len(GoalService(session).history(goal_id)) == 1
        assert GoalService(session).current_amount(goal_id) == 200_000


def test_legacy_pair_inside_window_is_resolved_both_ways() -> None:
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)

    with Session(engine) as session:
        _legacy_pair(session, timedelta(seconds=10))

        GoalService(session).update_transaction(
            "GTX-1", GoalTransactionUpdate(amount=60_000)
        )
        assert session.get(Transaction, "TRX-1").amount == 60_000

        TransactionService(session).delete("TRX-1")
        assert session.get(GoalTransaction, "GTX-1") is None


def test_legacy_pair_outside_window_is_not_resolved() -> None:
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)

    with Session(engine) as session:
        _legacy_pair(session, timedelta(seconds=11))

        GoalService(session).update_transaction(
            "GTX-1", GoalTransactionUpdate(amount=60_000)
        )

        assert session.get(Transaction, "TRX-1").amount == 50_000
        assert session.get(GoalTransaction, "GTX-1").transaction_id is None


def test_backfill_links_legacy_rows_once() -> None:
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)

    with Session(engine) as session:
        _legacy_pair(session, timedelta(seconds=-3))
        links = LinkService(session)

        assert links.backfill() == 1
        assert links.backfill() == 0
        assert session.get(GoalTransaction, "GTX-1").transaction_id == "TRX-1"
