"""Telegram delivery of notification events."""

import logging

from telegram.error import TelegramError
from telegram.ext import Application, ContextTypes

from subminder.bot.formatters import format_notification
from subminder.bot.keyboards import reminder_keyboard
from subminder.db.models import NotificationEvent

logger = logging.getLogger(__name__)


async def delete_message_job(context: ContextTypes.DEFAULT_TYPE) -> None:
    """Job callback removing an expired toast message."""
    chat_id, message_id = context.job.data  # type: ignore
    try:
        await context.bot.delete_message(chat_id=chat_id, message_id=message_id)
    except TelegramError as e:
        logger.debug(f"Could not delete expired message {message_id}: {e}")


class TelegramNotifier:
    """Delivers notification events to the owner's chat.

    Registered with the notification center as a plain callback; sending is
    scheduled as a task so the engine never waits on the network.
    """

    def __init__(self, application: Application, chat_id: int):
        self.application = application
        self.chat_id = chat_id

    def __call__(self, event: NotificationEvent) -> None:
        self.application.create_task(self.deliver(event))

    async def deliver(self, event: NotificationEvent) -> None:
        """Send one event; toasts are deleted again when they expire."""
        reply_markup = None
        sub = event.subscription
        if event.severity == "warning" and sub is not None and sub.next_payment is not None:
            reply_markup = reminder_keyboard(sub.id, sub.next_payment, event.id)

        try:
            message = await self.application.bot.send_message(
                chat_id=self.chat_id,
                text=format_notification(event),
                parse_mode="HTML",
                reply_markup=reply_markup,
            )
        except TelegramError as e:
            logger.error(f"Failed to deliver notification {event.id}: {e}")
            return

        if event.expires_at is not None and self.application.job_queue:
            ttl = (event.expires_at - event.created_at).total_seconds()
            self.application.job_queue.run_once(
                delete_message_job,
                when=ttl,
                data=(self.chat_id, message.message_id),
                name=f"expire-{event.id}",
            )
