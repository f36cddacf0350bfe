"""Cost normalization and portfolio statistics."""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, List

from subminder.db.models import Subscription
from subminder.utils.constants import (
    ANNUAL_FACTORS,
    MONTHLY_DIVISORS,
    MONTHLY_MULTIPLIERS,
    UPCOMING_HORIZON_DAYS,
)
from subminder.utils.time_utils import days_until


@dataclass
class PortfolioSummary:
    """Aggregate figures across all subscriptions."""

    monthly_total: float
    annual_total: float
    count: int
    monthly_average: float
    upcoming_count: int


def monthly_equivalent(sub: Subscription) -> float:
    """Normalize a subscription's price to a monthly figure.

    Examples:
        12.00 monthly  -> 12.00
        120.00 yearly  -> 10.00
        10.00 weekly   -> 43.30
        30.00 quarterly -> 10.00
    """
    if sub.cycle in MONTHLY_DIVISORS:
        return sub.price / MONTHLY_DIVISORS[sub.cycle]
    return sub.price * MONTHLY_MULTIPLIERS[sub.cycle]


def annual_equivalent(sub: Subscription) -> float:
    """Normalize a subscription's price to a yearly figure."""
    if sub.cycle == "yearly":
        return sub.price
    return sub.price * ANNUAL_FACTORS[sub.cycle]


def portfolio_monthly_total(subs: Iterable[Subscription]) -> float:
    """Sum of monthly equivalents (0 for an empty collection)."""
    return sum((monthly_equivalent(sub) for sub in subs), 0.0)


def portfolio_annual_total(subs: Iterable[Subscription]) -> float:
    """Sum of annual equivalents (0 for an empty collection)."""
    return sum((annual_equivalent(sub) for sub in subs), 0.0)


def portfolio_summary(
    subs: List[Subscription], now: datetime | None = None
) -> PortfolioSummary:
    """Build the dashboard figures for a set of subscriptions.

    ``upcoming_count`` counts charges due within the next week (today
    included); subscriptions without a usable date are not counted.
    """
    monthly = portfolio_monthly_total(subs)
    upcoming = 0
    for sub in subs:
        days = days_until(sub.next_payment, now)
        if days is not None and 0 <= days <= UPCOMING_HORIZON_DAYS:
            upcoming += 1

    return PortfolioSummary(
        monthly_total=monthly,
        annual_total=portfolio_annual_total(subs),
        count=len(subs),
        monthly_average=monthly / (len(subs) or 1),
        upcoming_count=upcoming,
    )


def filter_and_sort(
    subs: Iterable[Subscription], query: str = "", sort_by: str = "date"
) -> List[Subscription]:
    """Filter subscriptions by name and order them for display.

    Args:
        subs: Subscriptions to list
        query: Case-insensitive substring matched against the name
        sort_by: One of "date", "price-asc", "price-desc", "name";
            anything else keeps insertion order

    Returns:
        New list; subscriptions without a valid date sort last by date
    """
    needle = query.lower()
    matching = [sub for sub in subs if needle in sub.name.lower()]

    if sort_by == "date":
        return sorted(
            matching,
            key=lambda s: (s.next_payment is None, s.next_payment or date.max),
        )
    elif sort_by == "price-asc":
        return sorted(matching, key=lambda s: s.price)
    elif sort_by == "price-desc":
        return sorted(matching, key=lambda s: s.price, reverse=True)
    elif sort_by == "name":
        return sorted(matching, key=lambda s: s.name.lower())

    return matching
