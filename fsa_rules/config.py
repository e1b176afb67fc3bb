"""Machine configuration dataclass."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class MachineConfig:
    """Immutable options applied after the state table is built.

    Attributes:
        start: Enter the first declared state as soon as the machine is built.
        done: Initial done value, a constant or a callable taking the machine.
        strict: Require exactly one matching rule per transition.
    """

    start: bool = False
    done: Any = False
    strict: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.start, bool):
            raise TypeError(f"start must be a bool, got {type(self.start).__name__}")
        if not isinstance(self.strict, bool):
            raise TypeError(f"strict must be a bool, got {type(self.strict).__name__}")
