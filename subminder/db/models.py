"""Data models."""

from dataclasses import dataclass
from datetime import date, datetime

from subminder.utils.constants import (
    DEFAULT_COLOR,
    DEFAULT_ICON,
    BillingCycle,
    Severity,
)


@dataclass
class Subscription:
    """A recurring charge tracked for the user."""

    id: int
    name: str
    price: float  # per billing cycle
    cycle: BillingCycle
    next_payment: date | None  # None only for malformed stored data
    color: str = DEFAULT_COLOR
    icon: str = DEFAULT_ICON


@dataclass
class SubscriptionDraft:
    """Unvalidated user input for creating or editing a subscription."""

    name: str = ""
    price: str | float | None = None
    cycle: str = "monthly"
    next_payment: str | date | None = None
    color: str = DEFAULT_COLOR
    icon: str = DEFAULT_ICON


@dataclass(frozen=True)
class ReminderRecord:
    """A reminder already raised for one subscription charge."""

    subscription_id: int
    due_date: date


@dataclass
class NotificationEvent:
    """Transient user-facing notification."""

    id: str
    message: str
    severity: Severity
    created_at: datetime
    subscription: Subscription | None = None
    expires_at: datetime | None = None  # None = stays until dismissed

    def is_expired(self, now: datetime) -> bool:
        """Check whether the display duration has elapsed."""
        return self.expires_at is not None and now >= self.expires_at
