"""One-time command to seed the initial ADMIN user.

Usage:
    virtuebox-seed-admin
    python -m virtuebox.seed_admin --email admin@example.com --password '...'

Set DATABASE_URL (and optionally SEED_ADMIN_*) in the environment or .env
before running. Running it again is a no-op once the admin exists.
"""

import argparse
import logging
import sys
from typing import List, Optional

from virtuebox import config
from virtuebox.core.database import Database
from virtuebox.core.exceptions import VirtueBoxError
from virtuebox.core.logging_config import setup_logging
from virtuebox.utils.user_manager import UserManager

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed the initial ADMIN user.")
    parser.add_argument("--email", default=config.SEED_ADMIN_EMAIL)
    parser.add_argument("--password", default=config.SEED_ADMIN_PASSWORD)
    parser.add_argument("--name", default=config.SEED_ADMIN_NAME)
    return parser.parse_args(argv)


def seed_admin(database: Database, name: str, email: str, password: str) -> bool:
    """Create the admin if missing.

    Returns:
        True if an admin was created, False if it already existed.
    """
    db = database.session()
    try:
        created = UserManager(db).seed_admin(name, email, password)
    finally:
        db.close()
    return created is not None


def main(argv: Optional[List[str]] = None) -> int:
    setup_logging()
    args = parse_args(argv)
    try:
        database = Database(config.require_database_url())
    except VirtueBoxError as e:
        logger.error("Seed failed: %s", e)
        return 1

    try:
        created = seed_admin(database, args.name, args.email, args.password)
    except VirtueBoxError as e:
        logger.error("Seed failed: %s", e)
        return 1
    finally:
        database.dispose()

    if created:
        logger.info("Admin user created: %s", args.email.strip().lower())
        logger.warning("Change the seeded admin password after first login.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
