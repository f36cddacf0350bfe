"""Reminder scheduler - the periodic sweep that raises payment reminders."""

import logging
from typing import List

from telegram.ext import ContextTypes, Job, JobQueue

from subminder.db.models import NotificationEvent, Subscription
from subminder.engine.state import SubscriptionState
from subminder.utils.constants import REMINDER_WINDOW_DAYS, SWEEP_INTERVAL_SECONDS
from subminder.utils.time_utils import days_until, format_due_phrase

logger = logging.getLogger(__name__)

JOB_NAME = "reminder-sweep"


def format_reminder_message(sub: Subscription, days: int) -> str:
    """Reminder text, e.g. "Netflix payment due in 2 days"."""
    return f"{sub.name} payment {format_due_phrase(days)}"


def in_reminder_window(days: int | None, window_days: int = REMINDER_WINDOW_DAYS) -> bool:
    """Check a day count against the inclusive [0, window_days] window."""
    return days is not None and 0 <= days <= window_days


class ReminderScheduler:
    """Decides when a reminder fires, at most once per (subscription, due date).

    The sweep runs once at startup and then every ``interval_seconds`` as a
    repeating job. It is not ordered by due date: every subscription in the
    window is reported in the same pass, in insertion order.
    """

    def __init__(
        self,
        state: SubscriptionState,
        window_days: int = REMINDER_WINDOW_DAYS,
        interval_seconds: int = SWEEP_INTERVAL_SECONDS,
    ):
        self.state = state
        self.window_days = window_days
        self.interval_seconds = interval_seconds
        self._job: Job | None = None

    @property
    def running(self) -> bool:
        """Whether the repeating sweep is scheduled."""
        return self._job is not None

    def sweep(self) -> List[NotificationEvent]:
        """Emit reminders that are due right now and record them as fired.

        Records are written in the same pass, so an immediate second sweep
        emits nothing for the same charges.

        Returns:
            The reminder events raised by this sweep
        """
        now = self.state.clock()
        ledger = self.state.ledger
        events: List[NotificationEvent] = []

        for sub in self.state.subscriptions:
            days = days_until(sub.next_payment, now)

            if days is None:
                logger.warning(f"Skipping subscription {sub.id} ({sub.name}): no valid due date")
                continue

            if not in_reminder_window(days, self.window_days):
                continue

            if ledger.has_fired(sub.id, sub.next_payment):  # type: ignore
                continue

            ledger.record_fired(sub.id, sub.next_payment)  # type: ignore
            event = self.state.notifications.notify(
                format_reminder_message(sub, days),
                "warning",
                subscription=sub,
                expires=False,
            )
            events.append(event)

        if events:
            self.state.notify_changed("reminders")
            logger.info(f"Sweep: {len(events)} reminders fired")
        else:
            logger.debug("Sweep: nothing due")

        return events

    async def _sweep_job(self, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Job callback for the repeating sweep."""
        self.state.notifications.expire()
        self.sweep()

    def start(self, job_queue: JobQueue) -> Job:
        """Schedule the sweep: immediately, then every interval."""
        if self._job is not None:
            return self._job

        self._job = job_queue.run_repeating(
            self._sweep_job,
            interval=self.interval_seconds,
            first=0,
            name=JOB_NAME,
        )
        logger.info(f"Reminder sweep scheduled (interval: {self.interval_seconds}s)")
        return self._job

    def stop(self) -> None:
        """Cancel the repeating sweep."""
        if self._job is None:
            return

        self._job.schedule_removal()
        self._job = None
        logger.info("Reminder sweep cancelled")
