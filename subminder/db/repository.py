"""Database repository - whole-collection load/save for the engine state."""

import asyncio
import logging
from pathlib import Path
from typing import List

import aiosqlite

from subminder.db.models import ReminderRecord, Subscription
from subminder.utils.time_utils import parse_date

logger = logging.getLogger(__name__)


class Repository:
    """Storage collaborator backed by SQLite.

    Saves replace the whole collection in one transaction; there are no
    incremental writes.
    """

    def __init__(self, db_path: Path):
        self.db_path = db_path
        self._db: aiosqlite.Connection | None = None
        self._write_lock = asyncio.Lock()

    async def connect(self) -> None:
        """Open database connection."""
        self._db = await aiosqlite.connect(self.db_path)
        self._db.row_factory = aiosqlite.Row
        logger.info(f"Connected to database at {self.db_path}")

    async def close(self) -> None:
        """Close database connection."""
        if self._db:
            await self._db.close()
            self._db = None
            logger.info("Database connection closed")

    @property
    def db(self) -> aiosqlite.Connection:
        """Get the database connection."""
        if self._db is None:
            raise RuntimeError("Database not connected")
        return self._db

    # Subscriptions

    async def load_subscriptions(self) -> List[Subscription]:
        """Load every subscription in insertion order."""
        async with self.db.execute(
            "SELECT * FROM subscriptions ORDER BY position"
        ) as cursor:
            rows = await cursor.fetchall()
            return [self._row_to_subscription(row) for row in rows]

    async def save_subscriptions(self, subscriptions: List[Subscription]) -> None:
        """Replace the stored subscriptions with ``subscriptions``."""
        async with self._write_lock:
            try:
                await self.db.execute("DELETE FROM subscriptions")
                await self.db.executemany(
                    """
                    INSERT INTO subscriptions (
                        id, name, price, cycle, next_payment, color, icon, position
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    [
                        (
                            sub.id,
                            sub.name,
                            sub.price,
                            sub.cycle,
                            sub.next_payment.isoformat() if sub.next_payment else None,
                            sub.color,
                            sub.icon,
                            position,
                        )
                        for position, sub in enumerate(subscriptions)
                    ],
                )
                await self.db.commit()
            except Exception as e:
                await self.db.rollback()
                logger.error(f"Failed to save subscriptions: {e}")
                raise

        logger.debug(f"Saved {len(subscriptions)} subscriptions")

    # Reminder ledger

    async def load_reminder_ledger(self) -> List[ReminderRecord]:
        """Load every reminder record; rows with unreadable dates are dropped."""
        async with self.db.execute(
            "SELECT * FROM reminders ORDER BY position"
        ) as cursor:
            rows = await cursor.fetchall()

        records = []
        for row in rows:
            due_date = parse_date(row["due_date"])
            if due_date is None:
                logger.warning(
                    f"Dropping reminder record for subscription {row['subscription_id']}: "
                    f"bad date {row['due_date']!r}"
                )
                continue
            records.append(ReminderRecord(row["subscription_id"], due_date))
        return records

    async def save_reminder_ledger(self, records: List[ReminderRecord]) -> None:
        """Replace the stored reminder records with ``records``."""
        async with self._write_lock:
            try:
                await self.db.execute("DELETE FROM reminders")
                await self.db.executemany(
                    "INSERT INTO reminders (subscription_id, due_date, position) VALUES (?, ?, ?)",
                    [
                        (record.subscription_id, record.due_date.isoformat(), position)
                        for position, record in enumerate(records)
                    ],
                )
                await self.db.commit()
            except Exception as e:
                await self.db.rollback()
                logger.error(f"Failed to save reminder ledger: {e}")
                raise

        logger.debug(f"Saved {len(records)} reminder records")

    # Helper methods

    def _row_to_subscription(self, row: aiosqlite.Row) -> Subscription:
        """Convert a database row to a Subscription object."""
        next_payment = parse_date(row["next_payment"])
        if next_payment is None:
            logger.warning(
                f"Subscription {row['id']} ({row['name']}) has no valid due date: "
                f"{row['next_payment']!r}"
            )

        return Subscription(
            id=row["id"],
            name=row["name"],
            price=row["price"],
            cycle=row["cycle"],
            next_payment=next_payment,
            color=row["color"],
            icon=row["icon"],
        )
