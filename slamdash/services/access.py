"""Access gate: resolve the caller's identity and make the login-time role decision."""

from slamdash.core.exceptions import AccessDenied, InvalidCredentials
from slamdash.services.credentials import CredentialStore
from slamdash.services.roles import AccessLevel, permits
from slamdash.services.sessions import SessionManager


class AccessGate:
    """
    Single entry point protected handlers use to authenticate a request.

    The requested access group is checked once at login; the issued session
    does not record it, so later requests are only authenticated, not re-authorized.
    """

    def __init__(self, credentials: CredentialStore, sessions: SessionManager) -> None:
        self._credentials = credentials
        self._sessions = sessions

    @property
    def credentials(self) -> CredentialStore:
        return self._credentials

    @property
    def sessions(self) -> SessionManager:
        return self._sessions

    def authenticate(self, token: str | None) -> int | None:
        """User id for a live session token; None for missing, unknown and expired alike."""
        return self._sessions.validate(token)

    @staticmethod
    def authorize_login(
        account_role: str | AccessLevel | None,
        requested_group: str | AccessLevel | None,
    ) -> bool:
        return permits(account_role, requested_group)

    def login(self, username: str, password: str, requested_group: str | None) -> str:
        """
        Verify credentials, check the requested group, and issue a session token.

        Raises InvalidCredentials (whatever the underlying cause), AccessDenied, or StorageError.
        No session is created unless every step succeeds.
        """
        try:
            account = self._credentials.verify(username, password)
        except InvalidCredentials as e:
            raise InvalidCredentials() from e
        if not self.authorize_login(account.role, requested_group):
            raise AccessDenied()
        return self._sessions.issue(account.id)

    def logout(self, token: str | None) -> None:
        self._sessions.revoke(token)
