"""
Verify the database connection and create any missing tables.

Run with: python -m app.scripts.setup_db
"""
import asyncio
import logging
import sys

from sqlalchemy.exc import SQLAlchemyError

from app.core.database import engine
from app.core.startup import ensure_tables, list_tables

logger = logging.getLogger(__name__)


async def setup_db(db_engine=None) -> list[str]:
    """Print the tables found, create missing ones, return the created names."""
    db_engine = db_engine or engine
    tables = await list_tables(db_engine)
    print(f"Connected: {db_engine.url.render_as_string(hide_password=True)}")
    if tables:
        print("Available tables:")
        for name in sorted(tables):
            print(f"- {name}")
    else:
        print("- No tables found. This appears to be a new database.")
    created = await ensure_tables(db_engine)
    for name in created:
        print(f"Created table: {name}")
    print("Database setup completed.")
    return created


def main() -> int:
    logging.basicConfig(level=logging.INFO)
    try:
        asyncio.run(setup_db())
    except SQLAlchemyError as e:
        logger.error("Database setup failed: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
