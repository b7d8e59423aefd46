"""
Startup utilities for the application.
"""
import logging
from pathlib import Path

from sqlalchemy import inspect
from sqlalchemy.exc import OperationalError, ProgrammingError

from app.core.config import settings
from app.core.database import Base, engine
from app.models.client import Client  # noqa: F401  (registers table)
from app.models.payment_reminder_log import PaymentReminderLog  # noqa: F401

logger = logging.getLogger(__name__)


def _existing_tables(sync_conn) -> list[str]:
    return inspect(sync_conn).get_table_names()


async def list_tables(db_engine=None) -> list[str]:
    """Names of the tables present in the database."""
    db_engine = db_engine or engine
    async with db_engine.connect() as conn:
        return await conn.run_sync(_existing_tables)


async def ensure_tables(db_engine=None) -> list[str]:
    """
    Create any missing application tables. Returns the names that were created.
    Schema changes to existing tables go through Alembic migrations.
    """
    db_engine = db_engine or engine
    try:
        before = set(await list_tables(db_engine))
        async with db_engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        created = sorted(set(Base.metadata.tables) - before)
        if created:
            logger.info("Created missing tables: %s", ", ".join(created))
        else:
            logger.info("All tables present. Skipping table creation.")
        return created
    except (OperationalError, ProgrammingError) as e:
        logger.warning(
            "Database error during table check/creation. Error: %s. "
            "Please ensure database is accessible and run 'alembic upgrade head'.",
            e,
        )
        return []


def ensure_upload_dir() -> None:
    """Local quotation uploads need the directory to exist before it is mounted."""
    if settings.S3_BUCKET_NAME:
        return
    Path(settings.UPLOAD_DIR).mkdir(parents=True, exist_ok=True)
