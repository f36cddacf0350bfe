"""Constants and default values."""

from typing import Literal

BillingCycle = Literal["weekly", "monthly", "quarterly", "yearly"]
Severity = Literal["info", "success", "warning", "error"]

BILLING_CYCLES: tuple[str, ...] = ("weekly", "monthly", "quarterly", "yearly")

# Per-cycle price -> monthly figure: weekly prices are multiplied, longer
# cycles are divided by the months they cover
MONTHLY_MULTIPLIERS = {
    "weekly": 4.33,  # average weeks per month
    "monthly": 1.0,
}

MONTHLY_DIVISORS = {
    "quarterly": 3.0,
    "yearly": 12.0,
}

ANNUAL_FACTORS = {
    "weekly": 52.0,
    "monthly": 12.0,
    "quarterly": 4.0,
    "yearly": 1.0,
}

# Reminder window: fire when 0 <= days until due <= REMINDER_WINDOW_DAYS
REMINDER_WINDOW_DAYS = 3

# Horizon used by the "due soon" counter in portfolio summaries
UPCOMING_HORIZON_DAYS = 7

# Seconds between scheduler sweeps
SWEEP_INTERVAL_SECONDS = 3600

# Seconds a toast-style notification stays visible
NOTIFICATION_TTL_SECONDS = 5

SORT_OPTIONS = ("date", "price-asc", "price-desc", "name")

# Presentation defaults (opaque to the engine)
DEFAULT_COLOR = "bg-blue-500"
DEFAULT_ICON = "📱"

MAX_NAME_LENGTH = 200
