"""Calendar date utilities."""

from datetime import date, datetime
from typing import Callable

from dateutil.relativedelta import relativedelta

Clock = Callable[[], datetime]

CYCLE_DELTAS = {
    "weekly": relativedelta(days=7),
    "monthly": relativedelta(months=1),
    "quarterly": relativedelta(months=3),
    "yearly": relativedelta(years=1),
}


def system_clock() -> datetime:
    """Return the current local time."""
    return datetime.now()


def parse_date(value: object) -> date | None:
    """Coerce a stored or user-supplied value into a calendar date.

    Accepts ``date`` objects, ``datetime`` objects (time dropped) and ISO
    ``YYYY-MM-DD`` strings. Anything else yields None.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            return None
    return None


def days_until(target: date | None, now: datetime | None = None) -> int | None:
    """Signed number of days from today to ``target``.

    Both ends are whole calendar days in local time, so a charge due today
    is 0 and yesterday's is -1.

    Returns:
        Day count, or None when ``target`` is not a usable date.
    """
    target_date = parse_date(target)
    if target_date is None:
        return None

    if now is None:
        now = system_clock()

    return (target_date - now.date()).days


def advance(due: date, cycle: str) -> date:
    """Move a due date forward by one billing cycle.

    Examples:
        2025-05-15 weekly    -> 2025-05-22
        2025-01-31 monthly   -> 2025-02-28 (clamped to month end)
        2025-11-30 quarterly -> 2026-02-28
        2024-02-29 yearly    -> 2025-02-28
    """
    return due + CYCLE_DELTAS[cycle]


def format_due_phrase(days: int) -> str:
    """Phrase a day count for reminder messages.

    Examples:
        0  -> "due today"
        1  -> "due in 1 days"
        3  -> "due in 3 days"
        -2 -> "2 days overdue"
    """
    if days == 0:
        return "due today"
    if days < 0:
        overdue = abs(days)
        return f"{overdue} day{'s' if overdue != 1 else ''} overdue"
    return f"due in {days} days"


def format_countdown(days: int | None) -> str:
    """Short countdown used in subscription listings."""
    if days is None:
        return "No valid date"
    if days == 0:
        return "Due today"
    if days < 0:
        return f"{abs(days)} days overdue"
    return f"{days} days left"


def format_date(value: date | None) -> str:
    """Format a due date for display, e.g. "May 15, 2025"."""
    if value is None:
        return "unknown"
    return value.strftime("%b %d, %Y")
