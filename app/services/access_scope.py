"""Access Scope Resolver - branch isolation policy for every ledger query

This is the single place that decides which branch rows a caller may read or
mutate. It is pure: no session, no I/O, so the policy is unit-testable on its
own. Services ask ``resolve_scope`` for a ``ScopeFilter`` and then either
``apply`` it to a select or check a single row with ``ensure_visible``.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Optional, TypeVar
from uuid import UUID

from sqlalchemy import Select, false, or_

from app.core.exceptions import ForbiddenError
from app.models.enums import UserRole

logger = logging.getLogger(__name__)

S = TypeVar("S", bound=Select)


@dataclass(frozen=True)
class Actor:
    """Authenticated caller as seen by the ledger: role and assigned branch."""

    role: UserRole
    branch_id: Optional[UUID] = None
    user_id: Optional[UUID] = None

    @classmethod
    def from_user(cls, user) -> "Actor":
        return cls(role=UserRole(user.role), branch_id=user.branch_id, user_id=user.id)


class ScopeKind(str, enum.Enum):
    UNRESTRICTED = "unrestricted"
    BRANCH = "branch"
    EMPTY = "empty"


@dataclass(frozen=True)
class ScopeFilter:
    kind: ScopeKind
    branch_id: Optional[UUID] = None

    @classmethod
    def unrestricted(cls) -> "ScopeFilter":
        return cls(ScopeKind.UNRESTRICTED)

    @classmethod
    def for_branch(cls, branch_id: UUID) -> "ScopeFilter":
        return cls(ScopeKind.BRANCH, branch_id)

    @classmethod
    def empty(cls) -> "ScopeFilter":
        return cls(ScopeKind.EMPTY)

    @property
    def is_empty(self) -> bool:
        return self.kind == ScopeKind.EMPTY

    def allows(self, branch_id: Optional[UUID], include_shared: bool = False) -> bool:
        """
        Whether a row owned by ``branch_id`` is visible under this scope.

        ``include_shared`` treats a NULL branch as "every branch" (courses);
        such rows are visible to any non-empty scope.
        """
        if self.kind == ScopeKind.UNRESTRICTED:
            return True
        if self.kind == ScopeKind.BRANCH:
            if branch_id is None:
                return include_shared
            return branch_id == self.branch_id
        return False

    def apply(self, stmt: S, column, include_shared: bool = False) -> S:
        """Restrict ``stmt`` to rows whose ``column`` falls inside the scope."""
        if self.kind == ScopeKind.UNRESTRICTED:
            return stmt
        if self.kind == ScopeKind.BRANCH:
            if include_shared:
                return stmt.where(or_(column == self.branch_id, column.is_(None)))
            return stmt.where(column == self.branch_id)
        return stmt.where(false())


def resolve_scope(actor: Actor, requested_branch_id: Optional[UUID] = None) -> ScopeFilter:
    """
    Compute the effective branch filter for a caller.

    - SUPER_ADMIN: the requested branch if given, otherwise everything.
    - ADMIN: always their own branch, whatever was requested; an admin with
      no assigned branch gets an empty scope (empty results, not an error).
    - Any other role has no ledger access.

    Raises:
        ForbiddenError: role is not allowed to read ledger data
    """
    if actor.role == UserRole.SUPER_ADMIN:
        if requested_branch_id is not None:
            scope = ScopeFilter.for_branch(requested_branch_id)
        else:
            scope = ScopeFilter.unrestricted()
    elif actor.role == UserRole.ADMIN:
        if actor.branch_id is not None:
            scope = ScopeFilter.for_branch(actor.branch_id)
        else:
            scope = ScopeFilter.empty()
    elif actor.role == UserRole.STUDENT:
        raise ForbiddenError("Role not authorized to access financial data")
    else:
        raise ForbiddenError(f"Unknown role: {actor.role}")

    logger.debug(
        "Resolved access scope",
        extra={
            "role": actor.role.value,
            "requested_branch_id": str(requested_branch_id) if requested_branch_id else None,
            "scope": scope.kind.value,
            "scope_branch_id": str(scope.branch_id) if scope.branch_id else None,
        },
    )
    return scope


def ensure_visible(
    scope: ScopeFilter,
    branch_id: Optional[UUID],
    resource: str,
    include_shared: bool = False,
) -> None:
    """Raise ForbiddenError when a single row lies outside the caller's scope."""
    if not scope.allows(branch_id, include_shared=include_shared):
        raise ForbiddenError(f"{resource} belongs to a branch outside your scope")
