"""Command handlers."""

import logging
import re

from telegram import Update
from telegram.ext import ContextTypes

from subminder.bot.formatters import (
    format_help_message,
    format_subscription,
    format_subscription_list,
    format_totals,
    format_welcome_message,
)
from subminder.bot.keyboards import confirm_delete_keyboard
from subminder.db.models import Subscription, SubscriptionDraft
from subminder.engine.billing import filter_and_sort, portfolio_summary
from subminder.engine.scheduler import ReminderScheduler
from subminder.engine.state import SubscriptionState
from subminder.utils.constants import DEFAULT_ICON, SORT_OPTIONS, UPCOMING_HORIZON_DAYS
from subminder.utils.error_handler import ValidationError
from subminder.utils.time_utils import days_until

logger = logging.getLogger(__name__)

ADD_USAGE = (
    "Usage: /add <name> <price> <cycle> <YYYY-MM-DD> [icon]\n\n"
    "Example: /add Netflix 15.99 monthly 2025-05-15 🎬"
)
EDIT_FIELDS = ("name", "price", "cycle", "date", "icon", "color")

# Anything written like a date, valid or not
DATE_SHAPE = re.compile(r"^\d{4}-\d{1,2}-\d{1,2}$")


def parse_add_args(args: list[str]) -> SubscriptionDraft | None:
    """Split /add arguments into a draft.

    The name may contain spaces, so the arguments are read from the right:
    an optional icon, the due date, the cycle, the price, then the name.

    Returns:
        Draft (still unvalidated), or None if the shape is wrong
    """
    tokens = list(args)
    icon = DEFAULT_ICON

    if len(tokens) >= 5 and DATE_SHAPE.match(tokens[-2]) and not DATE_SHAPE.match(tokens[-1]):
        icon = tokens.pop()

    if len(tokens) < 4:
        return None

    return SubscriptionDraft(
        name=" ".join(tokens[:-3]),
        price=tokens[-3],
        cycle=tokens[-2],
        next_payment=tokens[-1],
        icon=icon,
    )


def draft_from_subscription(sub: Subscription) -> SubscriptionDraft:
    """Editable copy of an existing subscription."""
    return SubscriptionDraft(
        name=sub.name,
        price=sub.price,
        cycle=sub.cycle,
        next_payment=sub.next_payment,
        color=sub.color,
        icon=sub.icon,
    )


def parse_list_args(args: list[str]) -> tuple[str, str]:
    """Split /list arguments into (search query, sort option)."""
    tokens = list(args)
    sort_by = "date"
    if tokens and tokens[-1].lower() in SORT_OPTIONS:
        sort_by = tokens.pop().lower()
    return " ".join(tokens), sort_by


def _parse_id(args: list[str] | None) -> int | None:
    if not args or len(args) < 1:
        return None
    try:
        return int(args[0])
    except ValueError:
        return None


async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /start command."""
    if not update.message:
        return

    await update.message.reply_html(format_welcome_message())


async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /help command."""
    if not update.message:
        return

    await update.message.reply_html(format_help_message())


async def list_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /list [search] [sort] command."""
    if not update.message:
        return

    state: SubscriptionState = context.bot_data["state"]
    query, sort_by = parse_list_args(context.args or [])

    subs = filter_and_sort(state.subscriptions, query, sort_by)
    await update.message.reply_html(format_subscription_list(subs, state.clock(), query))


async def upcoming_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /upcoming command - payments due in the next 7 days."""
    if not update.message:
        return

    state: SubscriptionState = context.bot_data["state"]
    now = state.clock()

    upcoming = []
    for sub in filter_and_sort(state.subscriptions, sort_by="date"):
        days = days_until(sub.next_payment, now)
        if days is not None and 0 <= days <= UPCOMING_HORIZON_DAYS:
            upcoming.append(sub)

    if not upcoming:
        await update.message.reply_text("No payments due in the next 7 days.")
        return

    message = format_subscription_list(upcoming, now)
    await update.message.reply_html(f"<b>Upcoming (Next 7 Days)</b>\n\n{message}")


async def add_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /add <name> <price> <cycle> <date> [icon] command."""
    if not update.message:
        return

    draft = parse_add_args(context.args or [])
    if draft is None:
        await update.message.reply_text(ADD_USAGE)
        return

    state: SubscriptionState = context.bot_data["state"]
    try:
        state.add(draft)
    except ValidationError as e:
        # Already surfaced as an error notification
        logger.info(f"Rejected new subscription: {e}")


async def edit_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /edit <id> <field> <value> command."""
    if not update.message:
        return

    args = context.args or []
    subscription_id = _parse_id(args)
    if subscription_id is None or len(args) < 3 or args[1].lower() not in EDIT_FIELDS:
        await update.message.reply_text(
            "Usage: /edit <id> <field> <value>\n\n"
            f"Fields: {', '.join(EDIT_FIELDS)}\n"
            "Example: /edit 3 price 17.99"
        )
        return

    state: SubscriptionState = context.bot_data["state"]
    sub = state.get(subscription_id)
    if sub is None:
        await update.message.reply_text("Subscription not found.")
        return

    field = args[1].lower()
    value = " ".join(args[2:])
    draft = draft_from_subscription(sub)
    if field == "date":
        draft.next_payment = value
    else:
        setattr(draft, field, value)

    try:
        state.update(subscription_id, draft)
    except ValidationError as e:
        logger.info(f"Rejected edit of subscription {subscription_id}: {e}")


async def paid_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /paid <id> command."""
    if not update.message:
        return

    subscription_id = _parse_id(context.args)
    if subscription_id is None:
        await update.message.reply_text("Usage: /paid <subscription_id>")
        return

    state: SubscriptionState = context.bot_data["state"]
    if state.mark_paid(subscription_id) is None:
        await update.message.reply_text("Subscription not found.")


async def remind_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /remind <id> command."""
    if not update.message:
        return

    subscription_id = _parse_id(context.args)
    if subscription_id is None:
        await update.message.reply_text("Usage: /remind <subscription_id>")
        return

    state: SubscriptionState = context.bot_data["state"]
    if state.send_reminder(subscription_id) is None:
        await update.message.reply_text("Subscription not found.")


async def delete_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /delete <id> command - asks for confirmation first."""
    if not update.message:
        return

    subscription_id = _parse_id(context.args)
    if subscription_id is None:
        await update.message.reply_text("Usage: /delete <subscription_id>")
        return

    state: SubscriptionState = context.bot_data["state"]
    sub = state.get(subscription_id)
    if sub is None:
        await update.message.reply_text("Subscription not found.")
        return

    await update.message.reply_html(
        f"Delete this subscription?\n\n{format_subscription(sub, state.clock())}",
        reply_markup=confirm_delete_keyboard(subscription_id),
    )


async def totals_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /totals command - spending overview."""
    if not update.message:
        return

    state: SubscriptionState = context.bot_data["state"]
    summary = portfolio_summary(state.subscriptions, state.clock())
    await update.message.reply_html(format_totals(summary))


async def check_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /check command - run a reminder sweep now."""
    if not update.message:
        return

    scheduler: ReminderScheduler = context.bot_data["scheduler"]
    events = scheduler.sweep()

    if not events:
        await update.message.reply_text("No new payment reminders right now.")
