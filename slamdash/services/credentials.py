"""Credential store: verify username/password pairs and provision accounts."""

import logging
import secrets

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from slamdash.core.exceptions import (
    AccountExists,
    AccountInactive,
    AccountNotFound,
    BadCredential,
    StorageError,
)
from slamdash.core.security import BCRYPT_ROUNDS, hash_password, verify_password
from slamdash.models import User
from slamdash.schemas.auth import AccountRecord
from slamdash.services.roles import AccessLevel, parse_access_level

logger = logging.getLogger(__name__)


class CredentialStore:
    """
    Looks up accounts and checks passwords against their bcrypt hashes.

    Holds a non-owning reference to the session factory; every call runs in
    its own short-lived DB session.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        bcrypt_rounds: int = BCRYPT_ROUNDS,
    ) -> None:
        self._session_factory = session_factory
        self._bcrypt_rounds = bcrypt_rounds
        self._dummy_hash: str | None = None

    def _spend_dummy_check(self, password: str) -> None:
        # Unknown usernames cost one bcrypt comparison, same as known ones.
        if self._dummy_hash is None:
            self._dummy_hash = hash_password(secrets.token_hex(16), rounds=self._bcrypt_rounds)
        verify_password(password, self._dummy_hash)

    def verify(self, username: str, password: str) -> AccountRecord:
        """
        Return the account for username if password matches and the account is active.

        Raises AccountNotFound, AccountInactive or BadCredential; StorageError if the lookup fails.
        """
        try:
            with self._session_factory() as db:
                user = db.query(User).filter(User.username == username).first()
                record = AccountRecord.model_validate(user) if user is not None else None
                password_hash = user.password_hash if user is not None else None
        except SQLAlchemyError as e:
            logger.exception("Credential lookup failed")
            raise StorageError("Credential lookup failed") from e

        if record is None or password_hash is None:
            self._spend_dummy_check(password)
            raise AccountNotFound()
        matches = verify_password(password, password_hash)
        if not record.active:
            raise AccountInactive()
        if not matches:
            raise BadCredential()
        return record

    def get_account(self, user_id: int) -> AccountRecord | None:
        """Return the account with user_id, or None."""
        try:
            with self._session_factory() as db:
                user = db.get(User, user_id)
                return AccountRecord.model_validate(user) if user is not None else None
        except SQLAlchemyError as e:
            logger.exception("Account lookup failed for user_id=%s", user_id)
            raise StorageError("Account lookup failed") from e

    def count_accounts(self) -> int:
        try:
            with self._session_factory() as db:
                return db.query(User).count()
        except SQLAlchemyError as e:
            logger.exception("Account count failed")
            raise StorageError("Account count failed") from e

    def create_account(
        self,
        username: str,
        email: str,
        password: str,
        role: str | AccessLevel = AccessLevel.VIEWER,
        active: bool = True,
    ) -> AccountRecord:
        """
        Create an account with a bcrypt hash of password.

        Raises ValueError for an unknown role, AccountExists if username or email is taken.
        """
        level = parse_access_level(role)
        if level is None:
            raise ValueError(f"Unknown role: {role!r}")
        try:
            with self._session_factory() as db:
                existing = (
                    db.query(User)
                    .filter(or_(User.username == username, User.email == email))
                    .first()
                )
                if existing is not None:
                    raise AccountExists(f"User '{username}' or email '{email}' already exists.")
                user = User(
                    username=username,
                    email=email,
                    password_hash=hash_password(password, rounds=self._bcrypt_rounds),
                    role=level.value,
                    active=active,
                )
                db.add(user)
                try:
                    db.commit()
                except IntegrityError as e:
                    db.rollback()
                    raise AccountExists(
                        f"User '{username}' or email '{email}' already exists."
                    ) from e
                return AccountRecord.model_validate(user)
        except SQLAlchemyError as e:
            logger.exception("Account creation failed for username=%s", username)
            raise StorageError("Account creation failed") from e

    def bootstrap(self, username: str, email: str, password: str) -> int:
        """
        Create one administrator if the store holds no accounts.

        Returns the number of accounts created (1 or 0). Safe to call on every startup.
        """
        if self.count_accounts() > 0:
            return 0
        try:
            self.create_account(username, email, password, role=AccessLevel.ADMINISTRATOR)
        except AccountExists:
            # Another process bootstrapped first.
            return 0
        logger.warning(
            "Created default administrator account '%s'; rotate its password.",
            username,
        )
        return 1
