"""Tests for cost normalization and portfolio statistics."""

from datetime import date, datetime

import pytest

from subminder.db.models import Subscription
from subminder.engine.billing import (
    annual_equivalent,
    filter_and_sort,
    monthly_equivalent,
    portfolio_annual_total,
    portfolio_monthly_total,
    portfolio_summary,
)


def make_sub(sub_id, price, cycle, next_payment=date(2025, 6, 1), name=None):
    return Subscription(
        id=sub_id,
        name=name or f"Sub {sub_id}",
        price=price,
        cycle=cycle,
        next_payment=next_payment,
    )


def test_monthly_equivalent():
    """Test monthly normalization per cycle."""
    assert monthly_equivalent(make_sub(1, 12.0, "monthly")) == 12.0
    assert monthly_equivalent(make_sub(2, 120.0, "yearly")) == pytest.approx(10.0)
    assert monthly_equivalent(make_sub(3, 10.0, "weekly")) == pytest.approx(43.3)
    assert monthly_equivalent(make_sub(4, 30.0, "quarterly")) == pytest.approx(10.0)


def test_annual_equivalent():
    """Test annual normalization per cycle."""
    assert annual_equivalent(make_sub(1, 12.0, "monthly")) == 144.0
    assert annual_equivalent(make_sub(2, 120.0, "yearly")) == 120.0
    assert annual_equivalent(make_sub(3, 10.0, "weekly")) == 520.0
    assert annual_equivalent(make_sub(4, 30.0, "quarterly")) == 120.0


def test_portfolio_totals():
    """Test totals across mixed cycles."""
    subs = [make_sub(1, 12.0, "monthly"), make_sub(2, 120.0, "yearly")]

    assert portfolio_monthly_total(subs) == pytest.approx(22.0)
    assert portfolio_annual_total(subs) == pytest.approx(264.0)


def test_portfolio_totals_empty():
    """Test that no subscriptions cost nothing."""
    assert portfolio_monthly_total([]) == 0
    assert portfolio_annual_total([]) == 0


def test_portfolio_summary():
    """Test dashboard figures."""
    now = datetime(2025, 5, 13, 12, 0)
    subs = [
        make_sub(1, 12.0, "monthly", date(2025, 5, 13)),  # today
        make_sub(2, 120.0, "yearly", date(2025, 5, 20)),  # 7 days
        make_sub(3, 9.0, "monthly", date(2025, 5, 21)),  # 8 days
        make_sub(4, 5.0, "monthly", date(2025, 5, 1)),  # overdue
        make_sub(5, 1.0, "monthly", None),  # malformed
    ]

    summary = portfolio_summary(subs, now)

    assert summary.count == 5
    assert summary.monthly_total == pytest.approx(12 + 10 + 9 + 5 + 1)
    assert summary.monthly_average == pytest.approx(37 / 5)
    assert summary.upcoming_count == 2


def test_portfolio_summary_empty():
    """Test that the average does not divide by zero."""
    summary = portfolio_summary([], datetime(2025, 5, 13))

    assert summary.count == 0
    assert summary.monthly_average == 0
    assert summary.upcoming_count == 0


def test_filter_and_sort():
    """Test search and ordering for listings."""
    subs = [
        make_sub(1, 15.99, "monthly", date(2025, 5, 15), name="Netflix"),
        make_sub(2, 9.99, "monthly", date(2025, 5, 10), name="Spotify"),
        make_sub(3, 52.99, "monthly", date(2025, 4, 28), name="Adobe CC"),
        make_sub(4, 3.0, "monthly", None, name="Broken"),
    ]

    by_date = filter_and_sort(subs)
    assert [s.id for s in by_date] == [3, 2, 1, 4]

    assert [s.id for s in filter_and_sort(subs, sort_by="price-asc")] == [4, 2, 1, 3]
    assert [s.id for s in filter_and_sort(subs, sort_by="price-desc")] == [3, 1, 2, 4]
    assert [s.id for s in filter_and_sort(subs, sort_by="name")] == [3, 4, 1, 2]

    assert [s.id for s in filter_and_sort(subs, query="FLIX")] == [1]
    assert filter_and_sort(subs, query="hulu") == []


def test_monthly_equivalent_divides_longer_cycles():
    """Test yearly and quarterly prices are divided, not multiplied by a fraction."""
    assert monthly_equivalent(make_sub(1, 100.0, "yearly")) == 100 / 12
    assert monthly_equivalent(make_sub(2, 100.0, "quarterly")) == 100 / 3
