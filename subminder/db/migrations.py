"""Schema setup for the subscription store."""

import logging
from pathlib import Path

import aiosqlite

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).parent / "schema.sql"
REQUIRED_TABLES = ("subscriptions", "reminders")


async def init_database(db_path: Path) -> None:
    """Create the subscriptions and reminders tables if they are missing."""
    schema_sql = SCHEMA_PATH.read_text(encoding="utf-8")

    async with aiosqlite.connect(db_path) as db:
        await db.executescript(schema_sql)
        await db.commit()

    logger.info(f"Subscription store ready at {db_path}")


async def missing_tables(db_path: Path) -> list[str]:
    """Names of required tables not present in the database."""
    async with aiosqlite.connect(db_path) as db:
        async with db.execute("SELECT name FROM sqlite_master WHERE type = 'table'") as cursor:
            present = {row[0] for row in await cursor.fetchall()}
    return [table for table in REQUIRED_TABLES if table not in present]


async def run_migrations(db_path: Path) -> None:
    """Bring the database up to the current schema."""
    db_path.parent.mkdir(parents=True, exist_ok=True)

    missing = await missing_tables(db_path)
    if not missing:
        logger.debug("Schema up to date")
        return

    logger.info(f"Creating tables: {', '.join(missing)}")
    await init_database(db_path)
