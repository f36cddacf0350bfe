"""Reminder ledger - which subscription charges have already been reminded."""

import logging
from datetime import date
from typing import Iterable, List

from subminder.db.models import ReminderRecord

logger = logging.getLogger(__name__)


class ReminderLedger:
    """Set of (subscription_id, due_date) pairs that already fired.

    Records are never removed when a due date passes: advancing a
    subscription produces a new due date and therefore a new key. The only
    removal path is ``purge`` when a subscription is deleted.
    """

    def __init__(self, records: Iterable[ReminderRecord] = ()):
        self._records: dict[tuple[int, date], ReminderRecord] = {}
        for record in records:
            self._records[(record.subscription_id, record.due_date)] = record

    @classmethod
    def from_records(cls, records: Iterable[ReminderRecord]) -> "ReminderLedger":
        """Rebuild a ledger from persisted records (duplicates collapse)."""
        return cls(records)

    def __len__(self) -> int:
        return len(self._records)

    def has_fired(self, subscription_id: int, due_date: date) -> bool:
        """Check whether a reminder was raised for this charge."""
        return (subscription_id, due_date) in self._records

    def record_fired(self, subscription_id: int, due_date: date) -> bool:
        """Mark a charge as reminded.

        Returns:
            True if a new record was created, False if it already existed
        """
        key = (subscription_id, due_date)
        if key in self._records:
            return False

        self._records[key] = ReminderRecord(subscription_id, due_date)
        return True

    def purge(self, subscription_id: int) -> int:
        """Remove every record of a subscription.

        Returns:
            Number of records removed
        """
        stale = [key for key in self._records if key[0] == subscription_id]
        for key in stale:
            del self._records[key]

        if stale:
            logger.debug(f"Purged {len(stale)} reminder records for subscription {subscription_id}")
        return len(stale)

    def records(self) -> List[ReminderRecord]:
        """All records in insertion order."""
        return list(self._records.values())
