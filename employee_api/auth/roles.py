# employee_api/auth/roles.py - Role privilege order and authorization predicates

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from employee_api.utils.exceptions import ForbiddenError, UnauthenticatedError

if TYPE_CHECKING:
    from employee_api.auth.models import AuthContext

# Rows written before the three-tier model carry "admin"; it ranks as manager.
_LEGACY_ALIASES = {"admin": "manager"}


class Role(str, Enum):
    EMPLOYEE = "employee"
    MANAGER = "manager"
    DIRECTOR = "director"

    @property
    def rank(self) -> int:
        return _RANKS[self]

    def at_least(self, other: "Role") -> bool:
        return self.rank >= other.rank

    @classmethod
    def parse(cls, value: str | None, default: "Role | None" = None) -> "Role | None":
        """Parse a stored or requested role string. Unknown values yield ``default``."""
        if value is None:
            return default
        normalized = value.strip().lower()
        normalized = _LEGACY_ALIASES.get(normalized, normalized)
        try:
            return cls(normalized)
        except ValueError:
            return default


_RANKS = {
    Role.EMPLOYEE: 0,
    Role.MANAGER: 1,
    Role.DIRECTOR: 2,
}

LEAST_PRIVILEGED = Role.EMPLOYEE


def require_authenticated(auth: AuthContext | None) -> AuthContext:
    if auth is None:
        raise UnauthenticatedError()
    return auth


def require_director(auth: AuthContext | None) -> AuthContext:
    auth = require_authenticated(auth)
    if auth.role is not Role.DIRECTOR:
        raise ForbiddenError("Director only - highest level access required")
    return auth


def require_manager_or_above(auth: AuthContext | None) -> AuthContext:
    auth = require_authenticated(auth)
    if not auth.role.at_least(Role.MANAGER):
        raise ForbiddenError("Manager or Director access required")
    return auth


def require_admin_tier(auth: AuthContext | None) -> AuthContext:
    """
    Broadest non-employee gate, used by most writes on employee, leave,
    note and access-log resources. Legacy admins parse to manager, so the
    admitted set equals ``require_manager_or_above``.
    """
    auth = require_authenticated(auth)
    if not auth.role.at_least(Role.MANAGER):
        raise ForbiddenError("Admin access required")
    return auth
