"""Load the default tool catalog into MongoDB.

Usage: python -m toolshub.seed

Tools already present (matched by name) are left untouched, so the script can
be re-run without resetting popularity counters.
"""
import asyncio
import logging
import sys

from .database import Database
from .seed_data import default_tool_records

logger = logging.getLogger(__name__)


async def seed_tools(db: Database) -> int:
    """Insert missing default tools and return how many were added."""
    inserted = 0
    for record in default_tool_records(with_ids=False):
        if await db.tools.find_one(name=record["name"]):
            continue
        await db.tools.create(record)
        inserted += 1
    return inserted


async def main() -> int:
    db = Database(seed_tools=False)
    await db.connect()
    if db.fallback_mode:
        logger.error("[SEED] Database is not reachable, nothing was seeded")
        return 1

    try:
        inserted = await seed_tools(db)
        logger.info("[SEED] Inserted %d tools into the database", inserted)
    finally:
        await db.disconnect()
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    sys.exit(asyncio.run(main()))
