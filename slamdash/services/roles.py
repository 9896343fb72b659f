"""Role hierarchy: administrator > manager > analyst > viewer."""

from enum import Enum


class AccessLevel(str, Enum):
    """Closed set of access levels. Use parse_access_level for untrusted input."""

    ADMINISTRATOR = "administrator"
    MANAGER = "manager"
    ANALYST = "analyst"
    VIEWER = "viewer"

    @property
    def rank(self) -> int:
        """1 for viewer up to 4 for administrator."""
        return HIERARCHY.index(self) + 1


# Lowest to highest.
HIERARCHY: tuple[AccessLevel, ...] = (
    AccessLevel.VIEWER,
    AccessLevel.ANALYST,
    AccessLevel.MANAGER,
    AccessLevel.ADMINISTRATOR,
)

# Short identifiers used by older login forms and seeded accounts.
ACCESS_LEVEL_ALIASES: dict[str, AccessLevel] = {
    "admin": AccessLevel.ADMINISTRATOR,
}


def parse_access_level(value: str | AccessLevel | None) -> AccessLevel | None:
    """Return the AccessLevel for value, or None when it is missing or unknown."""
    if isinstance(value, AccessLevel):
        return value
    if not value:
        return None
    key = value.strip()
    if key in ACCESS_LEVEL_ALIASES:
        return ACCESS_LEVEL_ALIASES[key]
    try:
        return AccessLevel(key)
    except ValueError:
        return None


def permits(account_role: str | AccessLevel | None, requested_group: str | AccessLevel | None) -> bool:
    """
    True iff an account holding account_role may operate as requested_group.

    Unknown values on either side are denied; they never rank as zero.
    """
    role = parse_access_level(account_role)
    group = parse_access_level(requested_group)
    if role is None or group is None:
        return False
    return role.rank >= group.rank
