"""Read side of the payment reminder log."""
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.payment_reminder_log import PaymentReminderLog


def as_naive_utc(moment: datetime) -> datetime:
    """sent_at is stored as naive UTC; aware values are converted to match."""
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(timezone.utc).replace(tzinfo=None)


async def get_recent_reminders(
    db: AsyncSession,
    since: Optional[datetime] = None,
    limit: int = 50,
) -> List[PaymentReminderLog]:
    """Newest reminders first, optionally only those sent after `since`."""
    query = select(PaymentReminderLog).order_by(PaymentReminderLog.sent_at.desc())
    if since is not None:
        query = query.where(PaymentReminderLog.sent_at > as_naive_utc(since))
    result = await db.execute(query.limit(limit))
    return list(result.scalars().all())
