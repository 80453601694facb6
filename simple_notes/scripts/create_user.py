"""
Create a user from the command line (e.g. the first HOST). Run from project root:
  python -m simple_notes.scripts.create_user USERNAME PASSWORD [ROLE]
Example:
  python -m simple_notes.scripts.create_user admin your-secure-password ADMIN

The role is case-insensitive. Without one the registration rule applies: HOST
for the first user, USER after.
"""
import argparse
import logging
import sys

from simple_notes.core.database import SessionLocal, init_db
from simple_notes.core.security import hash_password, validate_password, validate_username
from simple_notes.models.user import User, UserRole
from simple_notes.services.users import save_new_user

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Simple Notes user.")
    parser.add_argument("username", help="Username (3-50 chars of letters, digits, _ and -)")
    parser.add_argument("password", help="Password (6-128 chars)")
    parser.add_argument(
        "role",
        nargs="?",
        default=None,
        type=str.upper,
        choices=[role.value for role in UserRole],
        help="Defaults to HOST for the first user, USER otherwise",
    )
    args = parser.parse_args(argv)

    username = args.username.strip()
    for error in (validate_username(username), validate_password(args.password)):
        if error:
            print(error, file=sys.stderr)
            return 1

    init_db()
    db = SessionLocal()
    try:
        existing = db.query(User).filter(User.username == username).first()
        if existing:
            print(f"User '{username}' already exists.", file=sys.stderr)
            return 1
        user = User(username=username, password_hash=hash_password(args.password))
        save_new_user(db, user, UserRole(args.role) if args.role else None)
        logger.info("Created user id=%s username=%s role=%s", user.id, username, user.role.value)
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
