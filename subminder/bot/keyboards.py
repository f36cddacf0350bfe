"""Inline keyboard builders."""

from datetime import date

from telegram import InlineKeyboardButton, InlineKeyboardMarkup


def reminder_keyboard(
    subscription_id: int, due_date: date, event_id: str
) -> InlineKeyboardMarkup:
    """Keyboard for reminder messages: Mark paid, Send reminder, Dismiss.

    The paid button carries the due date it was raised for, so a repeated
    or stale press cannot advance the subscription a second time.
    """
    return InlineKeyboardMarkup(
        [
            [
                InlineKeyboardButton(
                    "✓ Mark paid",
                    callback_data=f"paid:{subscription_id}:{due_date.isoformat()}",
                ),
                InlineKeyboardButton("✉ Send reminder", callback_data=f"remind:{subscription_id}"),
            ],
            [
                InlineKeyboardButton("✗ Dismiss", callback_data=f"dismiss:{event_id}"),
            ],
        ]
    )


def confirm_delete_keyboard(subscription_id: int) -> InlineKeyboardMarkup:
    """Keyboard for delete confirmation: Delete, Cancel."""
    return InlineKeyboardMarkup(
        [
            [
                InlineKeyboardButton("🗑 Delete", callback_data=f"delete:{subscription_id}"),
                InlineKeyboardButton("✗ Cancel", callback_data=f"cancel:{subscription_id}"),
            ]
        ]
    )
