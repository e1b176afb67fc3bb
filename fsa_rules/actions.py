"""Action-list normalization."""
from __future__ import annotations

from typing import Any, Callable

from fsa_rules.types import TableError


def as_actions(value: Any, where: str = "action list") -> tuple[Callable[..., Any], ...]:
    """Normalize ``None``, a single callable, or a sequence of callables.

    Returns a tuple in declaration order. Raises TableError for any other
    shape, including sequences holding non-callables.
    """
    if value is None:
        return ()
    if callable(value):
        return (value,)
    if isinstance(value, (str, bytes)) or not hasattr(value, "__iter__"):
        raise TableError(
            f"{where} must be a callable or a sequence of callables, "
            f"got {type(value).__name__}"
        )
    actions = tuple(value)
    for i, fn in enumerate(actions):
        if not callable(fn):
            raise TableError(
                f"{where} item {i} is not callable: {fn!r}"
            )
    return actions


def run_actions(actions: tuple[Callable[..., Any], ...], *args: Any) -> None:
    """Call each action in order with the same arguments."""
    for fn in actions:
        fn(*args)
