"""
Caller context and reviewer authorization.

Every orchestrator operation receives an explicit ``CallerContext`` instead
of reading "who is logged in" from ambient state. Whether that caller may
review reservations is decided by an ``Authorizer`` collaborator.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional, Protocol, Set

from portal.config.settings import settings
from portal.core.exceptions import PermissionDeniedError


@dataclass(frozen=True)
class CallerContext:
    """
    Represents the actor invoking a reservation operation.

    Attributes:
        identity: Stable identity of the caller (usually an email address)
        role: Caller's primary role
        organization_id: Organization the caller acts for, if any
    """
    identity: str
    role: str
    organization_id: Optional[int] = None
    metadata: dict = field(default_factory=dict)

    def has_any_role(self, roles: Iterable[str]) -> bool:
        """Check if caller has any of the specified roles."""
        return self.role in set(roles)


class Authorizer(Protocol):
    """Decides whether a caller may approve/reject reservations."""

    def can_review(self, caller: CallerContext, organization_id: Optional[int]) -> bool:
        ...


class RoleBasedAuthorizer:
    """Grants the reviewer privilege to a fixed set of roles."""

    def __init__(self, reviewer_roles: Optional[Iterable[str]] = None):
        self.reviewer_roles: Set[str] = set(reviewer_roles or settings.reviewer_roles)

    def can_review(self, caller: CallerContext, organization_id: Optional[int]) -> bool:
        return caller.has_any_role(self.reviewer_roles)


def require_reviewer(
    authorizer: Authorizer,
    caller: CallerContext,
    organization_id: Optional[int] = None,
) -> None:
    """
    Assert that the caller holds the reviewer privilege.

    Raises:
        PermissionDeniedError: If the authorizer refuses the caller
    """
    if not authorizer.can_review(caller, organization_id):
        raise PermissionDeniedError(
            f"Caller {caller.identity} with role '{caller.role}' may not review reservations",
            identity=caller.identity,
            role=caller.role,
        )


__all__ = [
    "CallerContext",
    "Authorizer",
    "RoleBasedAuthorizer",
    "require_reviewer",
]
