"""Billing cycle handling."""

import re

from subminder.db.models import Subscription
from subminder.utils.time_utils import advance

_CYCLE_ALIASES = {
    "week": "weekly",
    "weekly": "weekly",
    "month": "monthly",
    "monthly": "monthly",
    "quarter": "quarterly",
    "quarterly": "quarterly",
    "year": "yearly",
    "yearly": "yearly",
    "annual": "yearly",
    "annually": "yearly",
}


def build_cycle_from_text(cycle_text: str) -> str | None:
    """Map loose user input to a billing cycle.

    Examples:
        "monthly" -> "monthly"
        "every month" -> "monthly"
        "per year" -> "yearly"
        "annually" -> "yearly"
        "every 3 months" -> "quarterly"
        "every 12 months" -> "yearly"

    Returns:
        Cycle name or None if not recognized
    """
    text = cycle_text.lower().strip()

    match = re.match(r"(?:every|per|each)?\s*(\d+)\s+(week|month)s?$", text)
    if match:
        count = int(match.group(1))
        unit = match.group(2)
        if unit == "week" and count == 1:
            return "weekly"
        if unit == "month":
            return {1: "monthly", 3: "quarterly", 12: "yearly"}.get(count)
        return None

    match = re.match(r"(?:(?:every|per|each|a|an)\s+|/)?([a-z]+)$", text)
    if match:
        return _CYCLE_ALIASES.get(match.group(1))

    return None


def advance_subscription(sub: Subscription) -> Subscription | None:
    """Return a copy of ``sub`` moved forward by one billing cycle.

    Subscriptions without a usable due date are left alone (None).
    """
    if sub.next_payment is None:
        return None

    return Subscription(
        id=sub.id,
        name=sub.name,
        price=sub.price,
        cycle=sub.cycle,
        next_payment=advance(sub.next_payment, sub.cycle),
        color=sub.color,
        icon=sub.icon,
    )
