"""Main entry point for the SubMinder bot."""

import logging
import sys

from telegram.ext import (
    Application,
    CallbackQueryHandler,
    CommandHandler,
    filters,
)

from subminder.bot.callbacks import callback_router
from subminder.bot.handlers import (
    add_command,
    check_command,
    delete_command,
    edit_command,
    help_command,
    list_command,
    paid_command,
    remind_command,
    start_command,
    totals_command,
    upcoming_command,
)
from subminder.bot.notifier import TelegramNotifier
from subminder.config import Config
from subminder.db.migrations import run_migrations
from subminder.db.repository import Repository
from subminder.engine.ledger import ReminderLedger
from subminder.engine.notifications import NotificationCenter
from subminder.engine.scheduler import ReminderScheduler
from subminder.engine.state import ChangeListener, SubscriptionState
from subminder.utils.error_handler import error_handler

# Configure logging
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=getattr(logging, Config.LOG_LEVEL),
    stream=sys.stdout,
)

logger = logging.getLogger(__name__)


def persistence_listener(application: Application, repo: Repository) -> ChangeListener:
    """Build the on-change observer that saves whichever collection changed."""

    def on_change(collection: str, state: SubscriptionState) -> None:
        if collection == "subscriptions":
            application.create_task(repo.save_subscriptions(state.subscriptions))
        elif collection == "reminders":
            application.create_task(repo.save_reminder_ledger(state.ledger.records()))

    return on_change


async def post_init(application: Application) -> None:
    """Initialize bot resources after application is created."""
    await run_migrations(Config.DATABASE_PATH)

    repo = Repository(Config.DATABASE_PATH)
    await repo.connect()
    application.bot_data["repo"] = repo
    application.bot_data["owner_chat_id"] = Config.OWNER_CHAT_ID

    subscriptions = await repo.load_subscriptions()
    ledger = ReminderLedger.from_records(await repo.load_reminder_ledger())
    logger.info(f"Loaded {len(subscriptions)} subscriptions, {len(ledger)} reminder records")

    notifications = NotificationCenter(ttl_seconds=Config.NOTIFICATION_TTL_SECONDS)
    notifications.add_delivery(TelegramNotifier(application, Config.OWNER_CHAT_ID))

    state = SubscriptionState(subscriptions, ledger, notifications=notifications)
    state.add_listener(persistence_listener(application, repo))
    application.bot_data["state"] = state

    # Sweeps once right away, then on the interval
    scheduler = ReminderScheduler(
        state,
        window_days=Config.REMINDER_WINDOW_DAYS,
        interval_seconds=Config.SWEEP_INTERVAL_SECONDS,
    )
    if application.job_queue:
        scheduler.start(application.job_queue)
    application.bot_data["scheduler"] = scheduler

    logger.info("SubMinder initialized successfully")


async def post_shutdown(application: Application) -> None:
    """Cleanup resources on shutdown."""
    scheduler: ReminderScheduler = application.bot_data.get("scheduler")
    if scheduler:
        scheduler.stop()

    repo: Repository = application.bot_data.get("repo")
    if repo:
        await repo.close()

    logger.info("SubMinder shut down")


def main() -> None:
    """Start the bot."""
    try:
        Config.validate()
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)

    application = (
        Application.builder()
        .token(Config.TELEGRAM_BOT_TOKEN)
        .post_init(post_init)
        .post_shutdown(post_shutdown)
        .build()
    )

    # Only the owner's chat is served
    owner = filters.Chat(chat_id=Config.OWNER_CHAT_ID)

    application.add_handler(CommandHandler("start", start_command, filters=owner))
    application.add_handler(CommandHandler("help", help_command, filters=owner))
    application.add_handler(CommandHandler("list", list_command, filters=owner))
    application.add_handler(CommandHandler("upcoming", upcoming_command, filters=owner))
    application.add_handler(CommandHandler("add", add_command, filters=owner))
    application.add_handler(CommandHandler("edit", edit_command, filters=owner))
    application.add_handler(CommandHandler("paid", paid_command, filters=owner))
    application.add_handler(CommandHandler("remind", remind_command, filters=owner))
    application.add_handler(CommandHandler("delete", delete_command, filters=owner))
    application.add_handler(CommandHandler("totals", totals_command, filters=owner))
    application.add_handler(CommandHandler("check", check_command, filters=owner))

    # Callback queries (buttons); the router checks the owner chat itself
    application.add_handler(CallbackQueryHandler(callback_router))

    application.add_error_handler(error_handler)

    logger.info("Starting SubMinder bot...")
    application.run_polling(allowed_updates=["message", "callback_query"])


if __name__ == "__main__":
    main()
