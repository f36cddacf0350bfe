"""Error types and the global error handler for the bot."""

import logging

from telegram import Update
from telegram.error import BadRequest, NetworkError, TimedOut
from telegram.ext import ContextTypes

logger = logging.getLogger(__name__)


class ValidationError(ValueError):
    """Raised when user input for a subscription is missing or invalid."""


def describe_error(error: BaseException | None) -> str:
    """Reply text for an unhandled error."""
    if isinstance(error, TimedOut):
        return "⏱️ Telegram timed out. Please try again in a moment."
    if isinstance(error, BadRequest):
        return "❌ Telegram rejected that request. Use /help for command examples."
    if isinstance(error, NetworkError):
        return "🌐 Network error. Your subscriptions are safe, please try again."
    return "😅 Something went wrong. The error has been logged; use /help for assistance."


async def error_handler(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Log unhandled errors and tell the owner something failed."""
    logger.error("Exception while handling an update:", exc_info=context.error)

    if isinstance(update, Update) and update.effective_message:
        try:
            await update.effective_message.reply_text(describe_error(context.error))
        except Exception as e:
            logger.error(f"Failed to send error message to user: {e}")
