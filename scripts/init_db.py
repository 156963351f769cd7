"""Database initialization script.

Run this script to create the database tables.

Usage:
    python -m scripts.init_db
"""

import asyncio

from prompt_bulk.core.config import get_settings
from prompt_bulk.db.session import close_db, init_db


async def main() -> None:
    """Initialize the database."""
    settings = get_settings()
    await init_db(settings)
    await close_db()
    print("Database initialized successfully!")


if __name__ == "__main__":
    asyncio.run(main())
