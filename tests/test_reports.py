from datetime import date, datetime

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from database import Base
from models import TransactionType
from schemas import TransactionIn
from services import ReportService, TransactionService

NOW = datetime(2026, 2, 28, 20, 0)


def _add(session: Session, day: date, txn_type: TransactionType, category: str, amount: int):
    TransactionService(session).create(
        TransactionIn(date=day, type=txn_type, category=category, amount=amount),
        now=NOW,
    )


def test_monthly_report_buckets_expenses_by_day() -> None:
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)

    with Session(engine) as session:
        _add(session, date(2026, 2, 1), TransactionType.income, "Salary", 5_000_000)
        _add(session, date(2026, 2, 3), TransactionType.expense, "Food & Drinks", 40_000)
        _add(session, date(2026, 2, 3), TransactionType.expense, "Shopping", 200_000)
        _add(session, date(2026, 2, 28), TransactionType.expense, "Food & Drinks", 60_000)
        _add(session, date(2026, 3, 1), TransactionType.expense, "Health", 99_000)

        report = ReportService(session).monthly_report(2, 2026)

        assert len(report.daily_expenses) == 28
        assert report.daily_expenses[2] == 240_000
        assert report.daily_expenses[27] == 60_000
        assert sum(report.daily_expenses) == report.total_expense == 300_000
        assert report.total_income == 5_000_000
        assert report.net == 4_700_000
        assert [(s.label, s.value) for s in report.category_breakdown] == [
            ("Shopping", 200_000),
            ("Food & Drinks", 100_000),
        ]


def test_empty_month_is_zero_filled() -> None:
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)

    with Session(engine) as session:
        report = ReportService(session).monthly_report(2, 2024)

        assert report.daily_expenses == [0] * 29
        assert report.category_breakdown == []
        assert report.net == 0


def test_invalid_month_is_rejected() -> None:
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)

    with Session(engine) as session:
        with pytest.raises(ValueError):
            ReportService(session).monthly_report(13, 2026)
