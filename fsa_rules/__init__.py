"""fsa-rules - Build simple rule-driven state machines."""
from __future__ import annotations

from fsa_rules.actions import as_actions
from fsa_rules.config import MachineConfig
from fsa_rules.machine import Machine
from fsa_rules.rules import Rule, make_rule
from fsa_rules.state import State
from fsa_rules.trace import format_history
from fsa_rules.types import (
    AmbiguousTransitionError,
    DuplicateStateError,
    FSAError,
    NoTransitionError,
    NotStartedError,
    RuleDefinitionError,
    TableError,
    UnknownStateError,
)

__all__ = [
    "AmbiguousTransitionError",
    "DuplicateStateError",
    "FSAError",
    "Machine",
    "MachineConfig",
    "NoTransitionError",
    "NotStartedError",
    "Rule",
    "RuleDefinitionError",
    "State",
    "TableError",
    "UnknownStateError",
    "as_actions",
    "format_history",
    "make_rule",
]
