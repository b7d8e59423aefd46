"""
Cron job: check active clients and record payment reminders for due tomorrow and overdue.
Runs on a schedule (configurable interval) and on demand from POST /notifications/run.
"""
import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

from sqlalchemy import select

from app.core.database import get_async_session_maker_instance
from app.core.notification_service import (
    reminder_message,
    scope_key_for_client_due,
    send_payment_reminder,
)
from app.core.payment_schedule import current_cycle_due_date, is_active, is_overdue, next_due_date
from app.models.client import Client
from app.models.enums import ReminderType, SubscriptionStatus

logger = logging.getLogger(__name__)


@dataclass
class ReminderRunResult:
    due_tomorrow: int = 0
    overdue: int = 0
    errors: int = 0


async def check_and_send_payment_reminders(
    session_maker=None,
    today: Optional[date] = None,
) -> ReminderRunResult:
    """
    Record reminders for active clients due tomorrow or overdue.
    Prevents duplicates via PaymentReminderLog (reminder_type + scope_key).
    """
    logger.info("Cron: check_and_send_payment_reminders started")
    session_maker = session_maker or get_async_session_maker_instance()
    today = today or date.today()
    tomorrow = today + timedelta(days=1)
    outcome = ReminderRunResult()

    async with session_maker() as session:
        result = await session.execute(
            select(Client).where(Client.subscription_status == SubscriptionStatus.active.value)
        )
        clients = [c for c in result.scalars().all() if is_active(c)]
        # Detached rows stay readable after a rollback below
        session.expunge_all()

        for client in clients:
            try:
                reminders = []
                due = next_due_date(client.payment_due_day, today)
                if due == tomorrow:
                    reminders.append((ReminderType.due_tomorrow.value, due))
                if is_overdue(client, today):
                    reminders.append((ReminderType.overdue.value, current_cycle_due_date(client.payment_due_day, today)))

                for reminder_type, due_date in reminders:
                    title, body = reminder_message(reminder_type, client.company_name, client.quotation_amount, due_date)
                    sent = await send_payment_reminder(
                        session,
                        client_id=client.id,
                        reminder_type=reminder_type,
                        scope_key=scope_key_for_client_due(client.id, due_date),
                        title=title,
                        body=body,
                    )
                    if sent and reminder_type == ReminderType.overdue.value:
                        outcome.overdue += 1
                    elif sent:
                        outcome.due_tomorrow += 1
            except Exception as e:
                outcome.errors += 1
                await session.rollback()
                logger.exception("Cron: error processing client %s: %s", client.id, e)

    logger.info(
        "Cron: check_and_send_payment_reminders finished: due_tomorrow=%s overdue=%s errors=%s",
        outcome.due_tomorrow, outcome.overdue, outcome.errors,
    )
    return outcome
