"""
Lock notifications
Formats a locked entry or week and hands it to the webhook notifier.
"""
import logging

from vret_wash.services.notification_formatter import (
    format_daily_entry_message,
    format_weekly_summary_message,
)

logger = logging.getLogger(__name__)


def notify_entry_locked(notifier, entry):
    """
    Send the per-entry summary. Failures are logged and swallowed; the
    entry is already committed.
    """
    if notifier is None:
        return None
    try:
        message = format_daily_entry_message(entry)
    except (TypeError, ValueError) as e:
        logger.error(f"Could not format locked entry {entry!r}: {e}", exc_info=True)
        return None
    result = notifier.send(message, operation=f'daily entry {entry.team} {entry.date}')
    if result.failed:
        logger.warning(f"Daily notification for team {entry.team} on {entry.date} was not delivered")
    return result


def notify_week_locked(notifier, snapshot):
    """Send the weekly summary and return the DispatchResult"""
    message = format_weekly_summary_message(snapshot)
    return notifier.send(message, operation=f'weekly summary {snapshot.team} {snapshot.week_start}')
