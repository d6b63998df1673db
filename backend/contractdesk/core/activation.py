"""Activation Rules — pure checks for the "at most one active per scope" invariant.

Invariants:
    - A scope with zero active members is valid; active_of returns None for it
    - "No active member" and "empty scope" are told apart by the caller (len(scope))
    - Two active members in one scope is an InvariantViolationError
    - An active resource is never removable
"""

from collections.abc import Iterable
from typing import Protocol, TypeVar

from contractdesk.core.errors import (
    CannotRemoveActiveResourceError, ErrorContext, InvariantViolationError,
)


class Activatable(Protocol):
    """Anything carrying an active flag (wallets, payment methods)."""
    @property
    def active(self) -> bool: ...


A = TypeVar("A", bound=Activatable)


def active_of(scope: Iterable[A]) -> A | None:
    """The single active member of scope, or None."""
    active = [member for member in scope if member.active]
    if len(active) > 1:
        raise InvariantViolationError(
            f"{len(active)} active members found in one scope, expected at most 1.",
            ErrorContext(operation="active_of"),
        )
    return active[0] if active else None


def ensure_removable(
    active: bool, resource_type: str, resource_id: str,
) -> None:
    if active:
        raise CannotRemoveActiveResourceError(resource_type, resource_id)
