"""
Reset a user's password. Run from project root:
  python -m catalog.scripts.change_password EMAIL NEW_PASSWORD
"""
import argparse
import logging
import sys

from dotenv import load_dotenv

from catalog.core.config import get_settings
from catalog.core.database import create_db_engine, create_session_factory
from catalog.core.errors import CatalogError
from catalog.services.accounts import change_password, get_user_by_email

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Set a new password for a catalog user.")
    parser.add_argument("email", help="Email of the user")
    parser.add_argument("password", help="New password (at least 6 chars)")
    args = parser.parse_args(argv)

    load_dotenv()
    settings = get_settings()
    SessionLocal = create_session_factory(create_db_engine(settings))
    db = SessionLocal()
    try:
        user = get_user_by_email(db, args.email)
        if user is None:
            logger.error("User '%s' not found.", args.email)
            return 1
        change_password(db, user, args.password)
        logger.info("Password updated for '%s' (id=%s).", user.email, user.id)
        return 0
    except CatalogError as e:
        logger.error("Could not change password for '%s': %s", args.email, e.message)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
