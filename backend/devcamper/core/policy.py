# devcamper/core/policy.py
"""
Access policy for mutating operations.

All functions here are pure: they look only at the principal and the
values passed in, never at the database or the request.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Iterable


class Role(str, Enum):
    USER = "user"
    PUBLISHER = "publisher"
    ADMIN = "admin"


# Roles allowed to attempt each family of operations
BOOTCAMP_EDITORS = frozenset({Role.ADMIN, Role.PUBLISHER})
COURSE_EDITORS = frozenset({Role.ADMIN, Role.PUBLISHER})
REVIEW_AUTHORS = frozenset({Role.ADMIN, Role.USER})
USER_MANAGERS = frozenset({Role.ADMIN})


@dataclass(frozen=True)
class Principal:
    """The authenticated caller of a request."""
    id: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN


def role_allowed(principal: Principal, allowed: Iterable[Role]) -> bool:
    """True iff the principal's role is in the route's allow-list."""
    return principal.role in frozenset(allowed)


def can_mutate(principal: Principal, owner_id) -> bool:
    """
    Decide whether the principal may update/delete a resource.

    Admins may mutate anything; everyone else only what they own.
    owner_id may be a UUID or a string, it is compared by its string form.
    """
    if principal.is_admin:
        return True
    return owner_id is not None and str(owner_id) == principal.id


def can_create_bootcamp(principal: Principal, owned_count: int) -> bool:
    """A publisher owns at most one bootcamp; admins are not limited."""
    if principal.is_admin:
        return True
    return owned_count == 0
