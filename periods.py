from calendar import monthrange
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional


@dataclass(frozen=True)
class Period:
    slug: str
    start: date
    end: date


def month_bounds(year: int, month: int) -> tuple[date, date]:
    if not 1 <= month <= 12:
        raise ValueError("Month must be between 1 and 12")
    return date(year, month, 1), date(year, month, monthrange(year, month)[1])


def days_in_month(year: int, month: int) -> int:
    return monthrange(year, month)[1]


def is_same_month(value: date, today: date) -> bool:
    return value.year == today.year and value.month == today.month


def resolve_period(
    period: Optional[str],
    start: Optional[str],
    end: Optional[str],
    *,
    today: Optional[date] = None,
) -> Optional[Period]:
    """Map a list filter slug to an inclusive date range; ``all`` means none."""
    today = today or date.today()
    if not period or period == "all":
        return None
    if period == "today":
        return Period("today", today, today)
    if period == "week":
        monday = today - timedelta(days=today.weekday())
        return Period("week", monday, today)
    if period == "month":
        return Period("month", today.replace(day=1), today)
    if period == "custom":
        if not start or not end:
            raise ValueError("Custom period requires start and end dates")
        start_date = date.fromisoformat(start)
        end_date = date.fromisoformat(end)
        if start_date > end_date:
            raise ValueError("Start date must be before end date")
        return Period("custom", start_date, end_date)
    raise ValueError(f"Unknown period: {period}")
