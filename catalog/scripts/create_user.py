"""
Create a user directly in the database (e.g. the first superadmin). Run from project root:
  python -m catalog.scripts.create_user EMAIL PASSWORD [--name NAME] [--role ROLE]
Example:
  python -m catalog.scripts.create_user superadmin@company.com your-secure-password
"""
import argparse
import logging
import sys

from dotenv import load_dotenv
from email_validator import EmailNotValidError, validate_email
from sqlalchemy.exc import SQLAlchemyError

from catalog.core.config import get_settings
from catalog.core.database import create_db_engine, create_session_factory
from catalog.core.roles import Role
from catalog.models.user import User
from catalog.services.accounts import get_user_by_email, normalize_email

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def create_user(db, email: str, password: str, name: str, role: Role) -> User:
    """Insert the user; raises ValueError on bad input or an existing email."""
    email = normalize_email(email)
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValueError(f"Invalid email '{email}': {e}") from e
    name = name.strip()
    if not (2 <= len(name) <= 100):
        raise ValueError("Name must be 2-100 characters.")
    if get_user_by_email(db, email) is not None:
        raise ValueError(f"User '{email}' already exists.")
    user = User(name=name, email=email, password=password, role=role)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a catalog user (bootstrap path for superadmins).")
    parser.add_argument("email", help="Email address")
    parser.add_argument("password", help="Password (at least 6 chars)")
    parser.add_argument("--name", default="Super Administrator", help="Display name (2-100 chars)")
    parser.add_argument(
        "--role",
        default=Role.SUPERADMIN.value,
        choices=[role.value for role in Role],
    )
    args = parser.parse_args(argv)

    load_dotenv()
    settings = get_settings()
    SessionLocal = create_session_factory(create_db_engine(settings))
    db = SessionLocal()
    try:
        user = create_user(db, args.email, args.password, args.name, Role(args.role))
        logger.info("Created user '%s' (id=%s) with role '%s'.", user.email, user.id, user.role.value)
        return 0
    except (ValueError, SQLAlchemyError) as e:
        db.rollback()
        logger.error("%s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
