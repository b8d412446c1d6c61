"""
main.py
-------
Entry point for the public-health registry data layer.

Responsibilities:
    - Open the database connection pool (fatal if the store is unreachable).
    - Create the schema if it does not exist yet.
    - Log a row count per table.
    - Release the pool on shutdown.
"""

import sys

from db.connection import Database
from db.init_db import create_tables
from exceptions import StoreError
from repositories import build_repositories
from utils.logger import get_logger

logger = get_logger(__name__)


def main() -> int:
    """Bootstrap the store and report what it holds."""

    # ── 1. Database setup ─────────────────────────────────
    logger.info("Initializing database...")
    database = Database()
    try:
        database.open()
    except StoreError as e:
        logger.critical(f"Cannot start without a database: {e}")
        return 1

    try:
        create_tables(database)

        # ── 2. Summary ────────────────────────────────────
        repos = build_repositories(database)
        for table, count in repos.summary().items():
            logger.info(f"{table}: {count} row(s)")
    finally:
        # ── 3. Cleanup on shutdown ────────────────────────
        database.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
