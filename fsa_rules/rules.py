"""Transition rules and rule definition normalization."""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal

from fsa_rules.actions import as_actions
from fsa_rules.types import (
    Predicate,
    RuleDefinitionError,
    StateName,
    TableError,
    TransitionAction,
)

if TYPE_CHECKING:
    from fsa_rules.state import State

RuleKind = Literal["predicate", "constant", "labeled"]

_RECORD_KEYS = frozenset({"rule", "message", "action", "actions"})


@dataclass(frozen=True)
class Rule:
    """A single transition candidate out of a state.

    ``predicate`` is always callable once built; constants are wrapped.
    ``kind`` records which definition shape the rule came from.
    """

    target: State
    predicate: Predicate
    label: str | None = None
    actions: tuple[TransitionAction, ...] = field(default_factory=tuple)
    kind: RuleKind = "predicate"

    def check(self, state: State, *args: Any) -> Any:
        """Evaluate the predicate for ``state`` with the switch inputs."""
        return self.predicate(state, *args)


def constant(value: Any) -> Predicate:
    """Return a predicate that ignores its arguments and returns ``value``."""

    def predicate(*_args: Any) -> Any:
        return value

    return predicate


def _as_predicate(value: Any) -> tuple[Predicate, RuleKind]:
    if callable(value):
        return value, "predicate"
    return constant(value), "constant"


def _rule_actions(value: Any, where: str) -> tuple[TransitionAction, ...]:
    try:
        return as_actions(value, where)
    except TableError as exc:
        raise RuleDefinitionError(str(exc)) from exc


def make_rule(source: StateName, target: State, spec: Any) -> Rule:
    """Build a Rule from any accepted definition shape.

    Accepted shapes: a callable, a constant, a list/tuple whose first item
    is the predicate and whose remaining items are transition actions, or
    a mapping with ``rule`` plus optional ``message`` and ``action(s)``.
    """
    where = f'rule from "{source}" to "{target.name}"'

    if isinstance(spec, Mapping):
        unknown = set(spec) - _RECORD_KEYS
        if unknown:
            raise RuleDefinitionError(
                f"{where} has unknown keys: {', '.join(sorted(map(str, unknown)))}"
            )
        if "rule" not in spec:
            raise RuleDefinitionError(f"{where} is missing its 'rule' predicate")
        if "action" in spec and "actions" in spec:
            raise RuleDefinitionError(f"{where} sets both 'action' and 'actions'")
        if isinstance(spec["rule"], (list, tuple, Mapping)):
            raise RuleDefinitionError(
                f"{where} 'rule' must be a callable or a constant, "
                f"not a {type(spec['rule']).__name__}"
            )
        predicate, _ = _as_predicate(spec["rule"])
        label = spec.get("message")
        if label is not None and not isinstance(label, str):
            raise RuleDefinitionError(f"{where} message must be a string")
        actions = _rule_actions(spec.get("action", spec.get("actions")), where)
        return Rule(target, predicate, label, actions, "labeled")

    if isinstance(spec, (list, tuple)):
        if not spec:
            raise RuleDefinitionError(f"{where} is empty; a predicate is required")
        predicate, kind = _as_predicate(spec[0])
        actions = _rule_actions(spec[1:], where)
        return Rule(target, predicate, None, actions, kind)

    predicate, kind = _as_predicate(spec)
    return Rule(target, predicate, None, (), kind)


def rule_pairs(source: StateName, spec: Any) -> list[tuple[StateName, Any]]:
    """Split a state's ``rules`` entry into ordered (target, spec) pairs."""
    if spec is None:
        return []
    if isinstance(spec, Mapping):
        return list(spec.items())
    if isinstance(spec, (str, bytes)) or not hasattr(spec, "__iter__"):
        raise RuleDefinitionError(
            f'rules of state "{source}" must be a mapping or a sequence of '
            f"(target, rule) pairs"
        )
    pairs: list[tuple[StateName, Any]] = []
    for i, item in enumerate(spec):
        if not isinstance(item, (list, tuple)) or len(item) != 2:
            raise RuleDefinitionError(
                f'rule {i} of state "{source}" is not a (target, rule) pair: {item!r}'
            )
        pairs.append((item[0], item[1]))
    return pairs
