"""Subscription state container - CRUD and payment acknowledgment."""

import logging
import math
from typing import Callable, Iterable, List

from subminder.db.models import Subscription, SubscriptionDraft
from subminder.engine.cycles import advance_subscription, build_cycle_from_text
from subminder.engine.ledger import ReminderLedger
from subminder.engine.notifications import NotificationCenter
from subminder.utils.constants import BILLING_CYCLES, MAX_NAME_LENGTH
from subminder.utils.error_handler import ValidationError
from subminder.utils.time_utils import Clock, days_until, format_due_phrase, parse_date, system_clock

logger = logging.getLogger(__name__)

# Called with the collection name ("subscriptions" or "reminders") after a change
ChangeListener = Callable[[str, "SubscriptionState"], None]
IdFactory = Callable[[List[Subscription]], int]


def next_sequential_id(subs: List[Subscription]) -> int:
    """Default id factory: one past the highest id in use."""
    return max((sub.id for sub in subs), default=0) + 1


def parse_price(value: str | float | int | None) -> float:
    """Parse a price such as "15.99", "$15.99" or 15.99.

    Raises:
        ValidationError: if the value is empty, not a number or negative
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError("Please fill in all required fields")

    if isinstance(value, str):
        text = value.strip().lstrip("$€£").replace(",", "")
        try:
            price = float(text)
        except ValueError:
            raise ValidationError(f"Invalid price: {value}")
    else:
        price = float(value)

    if math.isnan(price) or math.isinf(price):
        raise ValidationError(f"Invalid price: {value}")
    if price < 0:
        raise ValidationError("Price must be a non-negative number")

    return price


def validate_draft(draft: SubscriptionDraft) -> dict:
    """Validate raw input and return the normalized subscription fields.

    Raises:
        ValidationError: describing the first problem found
    """
    name = (draft.name or "").strip()
    if not name or draft.price in (None, "") or not draft.next_payment:
        raise ValidationError("Please fill in all required fields")

    if len(name) > MAX_NAME_LENGTH:
        raise ValidationError(f"Name must be at most {MAX_NAME_LENGTH} characters")

    price = parse_price(draft.price)

    next_payment = parse_date(draft.next_payment)
    if next_payment is None:
        raise ValidationError("Next payment must be a date in YYYY-MM-DD format")

    cycle = build_cycle_from_text(draft.cycle or "")
    if cycle is None:
        raise ValidationError(f"Billing cycle must be one of: {', '.join(BILLING_CYCLES)}")

    return {
        "name": name,
        "price": price,
        "cycle": cycle,
        "next_payment": next_payment,
        "color": draft.color,
        "icon": draft.icon,
    }


class SubscriptionState:
    """Owner of the subscription collection and the reminder ledger.

    All mutations go through this object and run to completion; listeners
    are told which collection changed so the shell can persist it.
    """

    def __init__(
        self,
        subscriptions: Iterable[Subscription] = (),
        ledger: ReminderLedger | None = None,
        clock: Clock = system_clock,
        notifications: NotificationCenter | None = None,
        id_factory: IdFactory = next_sequential_id,
    ):
        self._subscriptions: List[Subscription] = list(subscriptions)
        self.ledger = ledger if ledger is not None else ReminderLedger()
        self.clock = clock
        self.notifications = notifications if notifications is not None else NotificationCenter(clock)
        self.id_factory = id_factory
        self._listeners: List[ChangeListener] = []

    @property
    def subscriptions(self) -> List[Subscription]:
        """Subscriptions in insertion order (a copy)."""
        return list(self._subscriptions)

    def add_listener(self, listener: ChangeListener) -> None:
        """Register an on-change observer."""
        self._listeners.append(listener)

    def notify_changed(self, collection: str) -> None:
        """Tell listeners that ``collection`` was mutated."""
        for listener in self._listeners:
            listener(collection, self)

    def get(self, subscription_id: int) -> Subscription | None:
        """Look up a subscription by id."""
        for sub in self._subscriptions:
            if sub.id == subscription_id:
                return sub
        return None

    def _replace(self, updated: Subscription) -> None:
        self._subscriptions = [
            updated if sub.id == updated.id else sub for sub in self._subscriptions
        ]

    # CRUD

    def add(self, draft: SubscriptionDraft) -> Subscription:
        """Create a subscription from user input.

        Raises:
            ValidationError: on missing or invalid fields; nothing is added
        """
        try:
            fields = validate_draft(draft)
        except ValidationError as e:
            self.notifications.notify(str(e), "error")
            raise

        sub = Subscription(id=self.id_factory(self._subscriptions), **fields)
        self._subscriptions.append(sub)
        self.notify_changed("subscriptions")

        logger.info(f"Added subscription {sub.id} ({sub.name})")
        self.notifications.notify(f"Added {sub.name} subscription", "success", sub)
        return sub

    def update(self, subscription_id: int, draft: SubscriptionDraft) -> Subscription | None:
        """Replace the editable fields of a subscription.

        Changing ``next_payment`` re-arms reminders, since the ledger key
        includes the due date.

        Raises:
            ValidationError: on invalid fields; the subscription is unchanged
        """
        current = self.get(subscription_id)
        if current is None:
            return None

        try:
            fields = validate_draft(draft)
        except ValidationError as e:
            self.notifications.notify(str(e), "error")
            raise

        updated = Subscription(id=current.id, **fields)
        self._replace(updated)
        self.notify_changed("subscriptions")

        logger.info(f"Updated subscription {updated.id} ({updated.name})")
        self.notifications.notify(f"Updated {updated.name}", "success", updated)
        return updated

    def remove(self, subscription_id: int) -> Subscription | None:
        """Delete a subscription and every reminder record referencing it."""
        sub = self.get(subscription_id)
        if sub is None:
            return None

        self._subscriptions = [s for s in self._subscriptions if s.id != subscription_id]
        self.notify_changed("subscriptions")

        if self.ledger.purge(subscription_id):
            self.notify_changed("reminders")

        logger.info(f"Removed subscription {subscription_id} ({sub.name})")
        self.notifications.notify("Subscription deleted", "info")
        return sub

    # Payments

    def mark_paid(self, subscription_id: int) -> Subscription | None:
        """Acknowledge a payment and move the due date forward one cycle.

        The ledger is not touched: the old (id, date) record stays, and the
        new date is a fresh key the scheduler can fire for later.
        """
        current = self.get(subscription_id)
        if current is None:
            return None

        advanced = advance_subscription(current)
        if advanced is None:
            logger.warning(f"Cannot advance subscription {subscription_id}: no valid due date")
            return None

        self._replace(advanced)
        self.notify_changed("subscriptions")

        logger.info(
            f"Marked subscription {subscription_id} paid: "
            f"{current.next_payment} -> {advanced.next_payment}"
        )
        self.notifications.notify(f"Marked {advanced.name} as paid", "success", advanced)
        return advanced

    def send_reminder(self, subscription_id: int) -> Subscription | None:
        """Manually send a reminder for a subscription.

        Independent of the ledger; the scheduler may still fire its own
        reminder for the same charge.
        """
        sub = self.get(subscription_id)
        if sub is None:
            return None

        days = days_until(sub.next_payment, self.clock())
        if days is None:
            phrase = "with no valid due date"
        else:
            phrase = format_due_phrase(days)

        self.notifications.notify(
            f"Email reminder sent for {sub.name} payment {phrase}", "success", sub
        )
        return sub
