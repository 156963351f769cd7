"""Database reset script.

Run this script to drop all tables and recreate them.
This will delete all templates, presets and generated prompts.

Usage:
    python -m scripts.reset_db
"""

import asyncio

from prompt_bulk.core.config import get_settings
from prompt_bulk.db.session import close_db, drop_all_tables, init_db


async def main() -> None:
    """Reset the database by dropping all tables and reinitializing."""
    settings = get_settings()

    print("Dropping all database tables...")
    await drop_all_tables(settings)
    print("All tables dropped successfully!")

    await init_db(settings)
    await close_db()
    print("Database reinitialized successfully!")


if __name__ == "__main__":
    asyncio.run(main())
