"""
Background payment reminder loop, started on app startup and cancelled on shutdown.
"""
import asyncio
import logging

from app.core.config import settings
from app.cron.payment_reminders import check_and_send_payment_reminders

logger = logging.getLogger(__name__)

FIRST_RUN_DELAY_SECONDS = 10
MIN_INTERVAL_SECONDS = 60.0


async def run_payment_reminder_cron_loop() -> None:
    """First pass shortly after boot, then one pass every CRON_PAYMENT_REMINDER_INTERVAL_HOURS."""
    interval_seconds = max(MIN_INTERVAL_SECONDS, settings.CRON_PAYMENT_REMINDER_INTERVAL_HOURS * 3600)
    logger.info("Payment reminder cron started (every %.0f s)", interval_seconds)
    try:
        await asyncio.sleep(FIRST_RUN_DELAY_SECONDS)
        while True:
            try:
                outcome = await check_and_send_payment_reminders()
                if outcome.errors:
                    logger.warning("Payment reminder pass had %s failing clients", outcome.errors)
            except Exception as e:
                logger.exception("Payment reminder pass failed: %s", e)
            await asyncio.sleep(interval_seconds)
    except asyncio.CancelledError:
        logger.info("Payment reminder cron cancelled")
