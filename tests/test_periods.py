from datetime import date

import pytest

from periods import days_in_month, month_bounds, resolve_period


def test_week_starts_on_monday() -> None:
    period = resolve_period("week", None, None, today=date(2026, 3, 12))

    assert period.start == date(2026, 3, 9)
    assert period.end == date(2026, 3, 12)


def test_all_and_missing_mean_no_range() -> None:
    assert resolve_period("all", None, None, today=date(2026, 3, 12)) is None
    assert resolve_period(None, None, None, today=date(2026, 3, 12)) is None


def test_custom_period_validates_order() -> None:
    period = resolve_period("custom", "2026-01-01", "2026-01-31")
    assert (period.start, period.end) == (date(2026, 1, 1), date(2026, 1, 31))

    with pytest.raises(ValueError):
        resolve_period("custom", "2026-02-01", "2026-01-31")
    with pytest.raises(ValueError):
        resolve_period("custom", None, "2026-01-31")
    with pytest.raises(ValueError):
        resolve_period("fortnight", None, None)


def test_month_bounds_handle_leap_years() -> None:
    assert month_bounds(2024, 2) == (date(2024, 2, 1), date(2024, 2, 29))
    assert days_in_month(2026, 2) == 28
    assert days_in_month(2026, 12) == 31
