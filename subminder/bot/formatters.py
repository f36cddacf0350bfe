"""Message text formatters."""

from datetime import datetime
from html import escape

from subminder.db.models import NotificationEvent, Subscription
from subminder.engine.billing import PortfolioSummary
from subminder.utils.constants import REMINDER_WINDOW_DAYS, UPCOMING_HORIZON_DAYS
from subminder.utils.time_utils import days_until, format_countdown, format_date

SEVERITY_EMOJI = {
    "success": "✅",
    "error": "❌",
    "warning": "⚠️",
    "info": "🔔",
}


def format_currency(amount: float) -> str:
    """Format an amount as US dollars, e.g. 1234.5 -> "$1,234.50"."""
    return f"${amount:,.2f}"


def format_subscription(sub: Subscription, now: datetime | None = None, show_id: bool = True) -> str:
    """Format a subscription as a message."""
    days = days_until(sub.next_payment, now)

    header = f"{sub.icon} <b>{escape(sub.name)}</b>"
    if show_id:
        header += f" (ID: {sub.id})"

    urgency = ""
    if days is not None and 0 <= days <= REMINDER_WINDOW_DAYS:
        urgency = "🔴 "
    elif days is not None and 0 <= days <= UPCOMING_HORIZON_DAYS:
        urgency = "🟡 "

    return (
        f"{header}\n"
        f"💰 {format_currency(sub.price)} / {sub.cycle}\n"
        f"📅 Next: {format_date(sub.next_payment)} ({urgency}{format_countdown(days)})"
    )


def format_subscription_list(
    subs: list[Subscription], now: datetime | None = None, query: str = ""
) -> str:
    """Format a list of subscriptions."""
    if not subs:
        if query:
            return f'No results for "{escape(query)}"'
        return "You haven't added any subscriptions yet. Use /add to create one."

    lines = [f"<b>Your Subscriptions ({len(subs)})</b>\n"]
    lines.extend(format_subscription(sub, now) for sub in subs)
    return "\n\n".join(lines)


def format_notification(event: NotificationEvent) -> str:
    """Format a notification event for delivery."""
    emoji = SEVERITY_EMOJI.get(event.severity, "🔔")
    if event.severity == "warning" and event.subscription is not None:
        return f"{emoji} <b>Subscription Reminder</b>\n\n{escape(event.message)}"
    return f"{emoji} {escape(event.message)}"


def format_totals(summary: PortfolioSummary) -> str:
    """Format the portfolio dashboard."""
    return (
        "<b>📊 Subscription Totals</b>\n\n"
        f"Monthly spending: <b>{format_currency(summary.monthly_total)}</b>\n"
        f"Monthly average per subscription: {format_currency(summary.monthly_average)}\n\n"
        f"Annual spending: <b>{format_currency(summary.annual_total)}</b>\n"
        f"Total subscriptions: {summary.count}\n\n"
        f"Due in the next 7 days: {summary.upcoming_count}"
    )


def format_welcome_message() -> str:
    """Format the welcome message for /start."""
    return """
<b>Welcome to SubMinder!</b> 💳

I keep track of your subscriptions and remind you before each payment is due.

<b>Quick Start:</b>
• /add Netflix 15.99 monthly 2025-05-15
• /list - See all your subscriptions
• /totals - Monthly and annual spending
• /help - Full command list
""".strip()


def format_help_message() -> str:
    """Format the help message."""
    return """
<b>SubMinder Commands 💳</b>

<b>Adding:</b>
/add &lt;name&gt; &lt;price&gt; &lt;cycle&gt; &lt;YYYY-MM-DD&gt; [icon]
Cycle: weekly, monthly, quarterly or yearly
Example: <code>/add Netflix 15.99 monthly 2025-05-15 🎬</code>

<b>Managing:</b>
/list [search] [date|price-asc|price-desc|name] - Your subscriptions
/upcoming - Payments due in the next 7 days
/paid &lt;id&gt; - Mark paid, moves the due date one cycle forward
/remind &lt;id&gt; - Send a reminder now
/edit &lt;id&gt; &lt;field&gt; &lt;value&gt; - Change name, price, cycle, date or icon
/delete &lt;id&gt; - Delete a subscription

<b>Info:</b>
/totals - Spending overview
/check - Check for due payments now

<b>Tips:</b>
• I remind you once per payment, up to 3 days before it's due
• Marking a payment as paid schedules the next one automatically
""".strip()
