"""
Create a user (e.g. the first admin). Run from project root:
  python -m app.scripts.create_user EMAIL PASSWORD NAME [role]
Example:
  python -m app.scripts.create_user admin@example.com 'Adm1nPassw0rd' 'System Admin' admin
"""
import argparse
import sys

from app.core.config import get_settings
from app.core.database import create_db_engine, create_session_factory
from app.core.errors import ConflictError
from app.core.security import hash_password
from app.models import UserRole
from app.repositories import users
from app.schemas.auth import (
    EMAIL_MAX_LEN,
    NAME_MAX_LEN,
    NAME_MIN_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Tasklane user from the command line.")
    parser.add_argument("email", help="Email address (stored lowercase)")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument("name", help=f"Display name ({NAME_MIN_LEN}-{NAME_MAX_LEN} chars)")
    parser.add_argument(
        "role",
        nargs="?",
        default=UserRole.USER.value,
        choices=[r.value for r in UserRole],
    )
    args = parser.parse_args(argv)

    email = args.email.strip().lower()
    name = args.name.strip()
    if "@" not in email or len(email) > EMAIL_MAX_LEN:
        print("Invalid email address.", file=sys.stderr)
        return 1
    if not (PASSWORD_MIN_LEN <= len(args.password) <= PASSWORD_MAX_LEN):
        print(f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.", file=sys.stderr)
        return 1
    if not (NAME_MIN_LEN <= len(name) <= NAME_MAX_LEN):
        print(f"Name must be {NAME_MIN_LEN}-{NAME_MAX_LEN} characters.", file=sys.stderr)
        return 1

    settings = get_settings()
    engine = create_db_engine(settings)
    db = create_session_factory(engine)()
    try:
        if users.exists_by_email(db, email):
            print(f"User '{email}' already exists.", file=sys.stderr)
            return 1
        users.create(
            db,
            email=email,
            password_hash=hash_password(args.password, settings.BCRYPT_ROUNDS),
            name=name,
            role=UserRole(args.role),
        )
        print(f"Created user '{email}' with role '{args.role}'.")
        return 0
    except ConflictError as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()
        engine.dispose()


if __name__ == "__main__":
    sys.exit(main())
