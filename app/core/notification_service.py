"""
Payment reminder service: record reminders once and deliver them by e-mail when configured.
Uses PaymentReminderLog for duplicate prevention (reminder_type + scope_key); the same log
feeds GET /notifications, which a desktop or browser shell polls to show notifications.
"""
import logging
from datetime import date
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.email import is_email_configured, send_payment_reminder_email
from app.core.money import format_currency
from app.models.enums import ReminderType
from app.models.payment_reminder_log import PaymentReminderLog

logger = logging.getLogger(__name__)


async def was_reminder_sent(
    db: AsyncSession,
    reminder_type: str,
    scope_key: str,
) -> bool:
    """Return True if this (reminder_type, scope_key) was already sent."""
    result = await db.execute(
        select(PaymentReminderLog.id).where(
            PaymentReminderLog.reminder_type == reminder_type,
            PaymentReminderLog.scope_key == scope_key,
        ).limit(1)
    )
    return result.scalar_one_or_none() is not None


async def send_payment_reminder(
    db: AsyncSession,
    client_id: UUID,
    reminder_type: str,
    scope_key: str,
    title: str,
    body: str,
) -> bool:
    """
    Log a reminder and e-mail it when e-mail is configured.
    Returns True if the reminder was recorded, False if it was a duplicate.
    """
    if await was_reminder_sent(db, reminder_type, scope_key):
        logger.debug("Skipping duplicate reminder: type=%s scope_key=%s", reminder_type, scope_key)
        return False

    emailed = False
    if is_email_configured():
        emailed = await send_payment_reminder_email(title, body)
        if not emailed:
            logger.warning("Reminder e-mail failed for client %s (type=%s)", client_id, reminder_type)
    else:
        logger.debug("E-mail not configured; reminder logged only: type=%s client_id=%s", reminder_type, client_id)

    db.add(
        PaymentReminderLog(
            reminder_type=reminder_type,
            scope_key=scope_key,
            client_id=client_id,
            title=title,
            body=body,
            emailed=emailed,
        )
    )
    await db.commit()
    logger.info("Payment reminder recorded: type=%s client_id=%s", reminder_type, client_id)
    return True


def scope_key_for_client_due(client_id: UUID, due_date: date) -> str:
    """Scope key for due_tomorrow / overdue reminders."""
    return f"client:{client_id}:due:{due_date.strftime('%Y-%m-%d')}"


def reminder_message(reminder_type: str, company_name: str, amount, due_date: date) -> tuple[str, str]:
    """(title, body) for a reminder."""
    formatted = format_currency(amount)
    if reminder_type == ReminderType.overdue.value:
        return (
            f"Payment Overdue: {company_name}",
            f"Payment of {formatted} for {company_name} is overdue. Please check the client details.",
        )
    return (
        f"Payment Due Tomorrow: {company_name}",
        f"Payment of {formatted} for {company_name} is due on {due_date.strftime('%Y-%m-%d')}.",
    )
