"""Callback query handlers for inline buttons."""

import logging
from datetime import date
from html import escape

from telegram import Update
from telegram.ext import ContextTypes

from subminder.engine.state import SubscriptionState
from subminder.utils.time_utils import parse_date

logger = logging.getLogger(__name__)


async def handle_paid_callback(
    update: Update,
    context: ContextTypes.DEFAULT_TYPE,
    subscription_id: int,
    due_date: date | None = None,
) -> None:
    """Handle 'Mark paid' button press.

    When the button names a due date, the payment is only applied while the
    subscription is still due on that date.
    """
    query = update.callback_query
    if not query:
        return

    state: SubscriptionState = context.bot_data["state"]
    current = state.get(subscription_id)
    if current is None:
        await query.answer("Subscription not found.")
        return

    if due_date is not None and current.next_payment != due_date:
        logger.info(
            f"Ignoring stale paid button for subscription {subscription_id}: "
            f"{due_date} != {current.next_payment}"
        )
        if query.message:
            await query.message.edit_reply_markup(reply_markup=None)
        await query.answer("Already marked paid")
        return

    advanced = state.mark_paid(subscription_id)

    if advanced is None:
        await query.answer("No valid due date to advance.")
        return

    if query.message:
        await query.message.edit_reply_markup(reply_markup=None)
    await query.answer(f"✓ Paid! Next: {advanced.next_payment:%b %d}")


async def handle_remind_callback(
    update: Update, context: ContextTypes.DEFAULT_TYPE, subscription_id: int
) -> None:
    """Handle 'Send reminder' button press."""
    query = update.callback_query
    if not query:
        return

    state: SubscriptionState = context.bot_data["state"]
    if state.send_reminder(subscription_id) is None:
        await query.answer("Subscription not found.")
        return

    await query.answer("✉ Reminder sent")


async def handle_delete_callback(
    update: Update, context: ContextTypes.DEFAULT_TYPE, subscription_id: int
) -> None:
    """Handle confirmed delete."""
    query = update.callback_query
    if not query:
        return

    state: SubscriptionState = context.bot_data["state"]
    removed = state.remove(subscription_id)

    if removed is None:
        await query.answer("Subscription not found.")
        return

    if query.message:
        await query.message.edit_text(
            f"🗑 Deleted: <b>{escape(removed.name)}</b>", parse_mode="HTML"
        )
    await query.answer()


async def callback_router(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Route callback queries to appropriate handlers."""
    if not update.callback_query:
        return

    query = update.callback_query
    data = query.data

    if not data:
        return

    owner_chat_id = context.bot_data.get("owner_chat_id")
    chat = update.effective_chat
    if owner_chat_id is not None and (chat is None or chat.id != owner_chat_id):
        logger.warning(f"Ignoring button press from chat {chat.id if chat else None}")
        await query.answer()
        return

    parts = data.split(":")
    action = parts[0]

    if action == "dismiss":
        state: SubscriptionState = context.bot_data["state"]
        if len(parts) > 1:
            state.notifications.dismiss(parts[1])
        if query.message:
            await query.message.delete()
        await query.answer()
        return

    try:
        subscription_id = int(parts[1])
    except (IndexError, ValueError):
        await query.answer("Unknown action")
        return

    if action == "paid":
        due_date = parse_date(parts[2]) if len(parts) > 2 else None
        if len(parts) > 2 and due_date is None:
            await query.answer("Unknown action")
            return
        await handle_paid_callback(update, context, subscription_id, due_date)

    elif action == "remind":
        await handle_remind_callback(update, context, subscription_id)

    elif action == "delete":
        await handle_delete_callback(update, context, subscription_id)

    elif action == "cancel":
        if query.message:
            await query.message.delete()
        await query.answer("Cancelled")

    else:
        await query.answer("Unknown action")
