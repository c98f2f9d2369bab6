"""Role capability lattice.

Kept as an explicit table so the rules can be read (and tested) on their own.
This is a lookup helper, not an enforcement layer: no store operation consults it.
"""

from __future__ import annotations

from workflow_orchestrator.models import Role, User

# Requested role -> user roles allowed to act at that level.
ROLE_CAPABILITIES: dict[Role, frozenset[Role]] = {
    Role.ADMIN: frozenset({Role.ADMIN}),
    Role.INSTRUCTOR: frozenset({Role.ADMIN, Role.INSTRUCTOR}),
    Role.STUDENT: frozenset({Role.ADMIN, Role.INSTRUCTOR, Role.STUDENT, Role.STAKEHOLDER}),
    Role.STAKEHOLDER: frozenset({Role.ADMIN, Role.INSTRUCTOR, Role.STAKEHOLDER}),
}


def _parse_role(value: Role | str) -> Role | None:
    if isinstance(value, Role):
        return value
    try:
        return Role(value)
    except ValueError:
        return None


def has_permission(user: User | None, required_role: Role | str) -> bool:
    """Return whether ``user`` may act at ``required_role`` level.

    No user is never allowed. An admin is always allowed, even for a role
    string outside the table; anyone else asking for such a role is refused.
    """

    if user is None:
        return False
    if user.role is Role.ADMIN:
        return True
    role = _parse_role(required_role)
    if role is None:
        return False
    return user.role in ROLE_CAPABILITIES[role]


def capability_rows() -> list[tuple[Role, list[Role]]]:
    """Table rows in declaration order, for display."""

    order = list(Role)
    return [
        (role, sorted(allowed, key=order.index)) for role, allowed in ROLE_CAPABILITIES.items()
    ]
