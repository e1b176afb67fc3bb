"""Shared type aliases and errors for fsa-rules."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Hashable, Sequence

if TYPE_CHECKING:
    from fsa_rules.machine import Machine
    from fsa_rules.state import State

StateName = Hashable

Action = Callable[["State"], Any]
TransitionAction = Callable[["State", "State"], Any]
Predicate = Callable[..., Any]
DonePredicate = Callable[["Machine"], Any]


class FSAError(Exception):
    """Base class for every error raised by the engine."""


class TableError(FSAError, ValueError):
    """Raised when a state table or state definition is malformed."""


class RuleDefinitionError(TableError):
    """Raised when a rule definition cannot be normalized."""


class DuplicateStateError(TableError):
    """Raised when the same state name is declared twice."""

    def __init__(self, name: StateName) -> None:
        self.name = name
        super().__init__(f'The state "{name}" already exists')


class UnknownStateError(FSAError, KeyError):
    """Raised when a state name is not declared in the machine."""

    def __init__(self, name: StateName, referenced_by: StateName | None = None) -> None:
        self.name = name
        self.referenced_by = referenced_by
        if referenced_by is None:
            message = f'No such state "{name}"'
        else:
            message = f'Unknown state "{name}" referenced by state "{referenced_by}"'
        super().__init__(message)

    def __str__(self) -> str:
        # KeyError would repr() the message.
        return str(self.args[0])


class NotStartedError(FSAError):
    """Raised when an operation needs a current state and there is none."""


class AmbiguousTransitionError(FSAError):
    """Raised in strict mode when more than one rule matches."""

    def __init__(self, state: StateName, candidates: Sequence[StateName]) -> None:
        self.state = state
        self.candidates = tuple(candidates)
        targets = ", ".join(f'"{c}"' for c in self.candidates)
        super().__init__(
            f'Attempt to switch from state "{state}" improperly found '
            f"multiple destination states: {targets}"
        )


class NoTransitionError(FSAError):
    """Raised by ``switch()`` when no rule of the current state matches."""

    def __init__(self, state: StateName) -> None:
        self.state = state
        super().__init__(f'Cannot determine transition from state "{state}"')
