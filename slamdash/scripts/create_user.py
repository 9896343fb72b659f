"""
Create a dashboard account. Run from project root:
  python -m slamdash.scripts.create_user USERNAME EMAIL PASSWORD [role]
Example:
  python -m slamdash.scripts.create_user alice alice@slam.local a-long-password manager
"""
import argparse
import sys

from slamdash.core.config import get_settings
from slamdash.core.database import create_db_engine, create_session_factory, init_db
from slamdash.core.exceptions import AccountExists
from slamdash.core.security import (
    EMAIL_MAX_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
)
from slamdash.services.credentials import CredentialStore
from slamdash.services.roles import AccessLevel


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create an SL&AM account (no registration UI).")
    parser.add_argument("username", help=f"Username (1-{USERNAME_MAX_LEN} chars)")
    parser.add_argument("email", help="Email address (unique)")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument(
        "role",
        nargs="?",
        default=AccessLevel.VIEWER.value,
        choices=[level.value for level in AccessLevel],
    )
    parser.add_argument("--inactive", action="store_true", help="Create the account deactivated")
    args = parser.parse_args(argv)

    username = args.username.strip()
    email = args.email.strip()
    if not username or len(username) > USERNAME_MAX_LEN:
        print("Invalid username length.", file=sys.stderr)
        return 1
    if not email or "@" not in email or len(email) > EMAIL_MAX_LEN:
        print("Invalid email address.", file=sys.stderr)
        return 1
    if len(args.password) < PASSWORD_MIN_LEN or len(args.password) > PASSWORD_MAX_LEN:
        print(
            f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.",
            file=sys.stderr,
        )
        return 1

    settings = get_settings()
    engine = create_db_engine(settings.DATABASE_URL, echo=settings.DEBUG)
    try:
        if settings.DB_CREATE_TABLES:
            init_db(engine)
        store = CredentialStore(create_session_factory(engine), bcrypt_rounds=settings.BCRYPT_ROUNDS)
        try:
            store.create_account(
                username,
                email,
                args.password,
                role=args.role,
                active=not args.inactive,
            )
        except AccountExists as e:
            print(e.message, file=sys.stderr)
            return 1
        print(f"Created user '{username}' with role '{args.role}'.")
        return 0
    finally:
        engine.dispose()


if __name__ == "__main__":
    sys.exit(main())
