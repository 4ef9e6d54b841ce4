"""
Database initialization script.
Creates every table directly from the models, or runs the Alembic
migrations when called with --migrate.
Run this as: python init_db.py [--migrate]
"""

import argparse
import logging
import sys

# Configure logging
logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
logger = logging.getLogger("db-init")

from app.core.config import settings
from app.db.init_db import create_all_tables, init_db

def main() -> int:
    parser = argparse.ArgumentParser(description="Initialize the Animeto database")
    parser.add_argument(
        "--migrate",
        action="store_true",
        help="Apply Alembic migrations instead of creating tables from the models",
    )
    args = parser.parse_args()

    logger.info("Initializing database")
    try:
        if args.migrate:
            init_db()
        else:
            create_all_tables()
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        return 1

    logger.info(f"Database initialization completed successfully ({settings.ENVIRONMENT})")
    return 0

if __name__ == "__main__":
    sys.exit(main())
