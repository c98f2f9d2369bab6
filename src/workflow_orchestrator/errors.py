"""Error kinds surfaced by the workflow store.

Nothing here is recovered internally: every error reaches the caller, and a
failed operation leaves the store unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass


class WorkflowError(Exception):
    """Base class for workflow store errors."""

    @property
    def message(self) -> str:
        return str(self)


@dataclass(eq=False)
class Unauthenticated(WorkflowError):
    """Raised by a mutating operation when no current user is set."""

    operation: str

    def __str__(self) -> str:
        return f"User must be logged in to {self.operation}"


@dataclass(eq=False)
class NotFound(WorkflowError):
    """Raised when a template, instance or approval id does not exist."""

    kind: str
    entity_id: str

    def __str__(self) -> str:
        return f"{self.kind.capitalize()} not found: {self.entity_id!r}"


@dataclass(eq=False)
class PreconditionViolation(WorkflowError):
    """Raised when an operation's input state cannot support it."""

    reason: str

    def __str__(self) -> str:
        return self.reason
