"""Error taxonomy for the auth subsystem.

Only coarse categories reach the client: every InvalidCredentials subclass is
reported as the same "Invalid credentials" message, Unauthenticated becomes a
redirect to the login page, and StorageError a generic server error.
"""


class SlamdashError(Exception):
    """Base for application errors; carries a human-readable message."""

    default_message = "Application error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class AuthError(SlamdashError):
    """Base for authentication and authorization failures."""

    default_message = "Authentication failed"


class InvalidCredentials(AuthError):
    """Username/password pair rejected. Subclasses are never distinguished to the user."""

    default_message = "Invalid credentials"


class AccountNotFound(InvalidCredentials):
    default_message = "Account not found"


class AccountInactive(InvalidCredentials):
    default_message = "Account is inactive"


class BadCredential(InvalidCredentials):
    default_message = "Password does not match"


class AccessDenied(AuthError):
    """Account role ranks below the requested access group (or the group is unknown)."""

    default_message = "Access denied for selected group"


class Unauthenticated(AuthError):
    """No session token, or the token is unknown or expired."""

    default_message = "Authentication required"


class AccountExists(SlamdashError):
    """Username or email already taken."""

    default_message = "Account already exists"


class StorageError(SlamdashError):
    """The persistence layer failed; details are logged, never shown to the client."""

    default_message = "Storage failure"
