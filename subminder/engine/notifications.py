"""Notification center - builds events and hands them to delivery."""

import logging
import uuid
from datetime import timedelta
from typing import Callable, List

from subminder.db.models import NotificationEvent, Subscription
from subminder.utils.constants import NOTIFICATION_TTL_SECONDS, Severity
from subminder.utils.time_utils import Clock, system_clock

logger = logging.getLogger(__name__)

Delivery = Callable[[NotificationEvent], None]


class NotificationCenter:
    """Holds the currently visible notifications.

    Toast-style events expire after ``ttl_seconds``; reminder events are
    created with ``expires=False`` and stay until dismissed. Every new event
    is passed to each registered delivery callback. Callbacks must not
    block; the bot shell schedules the actual send as a task.
    """

    def __init__(self, clock: Clock = system_clock, ttl_seconds: int = NOTIFICATION_TTL_SECONDS):
        self.clock = clock
        self.ttl = timedelta(seconds=ttl_seconds)
        self._active: List[NotificationEvent] = []
        self._deliveries: List[Delivery] = []

    def add_delivery(self, delivery: Delivery) -> None:
        """Register a delivery collaborator."""
        self._deliveries.append(delivery)

    def notify(
        self,
        message: str,
        severity: Severity = "info",
        subscription: Subscription | None = None,
        expires: bool = True,
    ) -> NotificationEvent:
        """Create an event, keep it visible and deliver it."""
        now = self.clock()
        event = NotificationEvent(
            id=uuid.uuid4().hex,
            message=message,
            severity=severity,
            created_at=now,
            subscription=subscription,
            expires_at=now + self.ttl if expires else None,
        )
        self.push(event)
        return event

    def push(self, event: NotificationEvent) -> None:
        """Show an already-built event (newest first) and deliver it."""
        self._active.insert(0, event)
        for delivery in self._deliveries:
            try:
                delivery(event)
            except Exception as e:
                logger.error(f"Notification delivery failed for event {event.id}: {e}")

    def dismiss(self, event_id: str) -> bool:
        """Remove a notification explicitly."""
        before = len(self._active)
        self._active = [event for event in self._active if event.id != event_id]
        return len(self._active) != before

    def expire(self) -> List[NotificationEvent]:
        """Drop notifications whose display duration has elapsed."""
        now = self.clock()
        expired = [event for event in self._active if event.is_expired(now)]
        if expired:
            self._active = [event for event in self._active if not event.is_expired(now)]
        return expired

    def active(self) -> List[NotificationEvent]:
        """Visible notifications, newest first."""
        return list(self._active)
