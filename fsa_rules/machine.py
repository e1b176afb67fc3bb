"""Machine - state table, transition selection, history, and run loop."""
from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Generator, Iterable, Union

from fsa_rules.actions import as_actions, run_actions
from fsa_rules.config import MachineConfig
from fsa_rules.rules import Rule, constant, make_rule, rule_pairs
from fsa_rules.state import State
from fsa_rules.types import (
    AmbiguousTransitionError,
    DonePredicate,
    DuplicateStateError,
    NoTransitionError,
    NotStartedError,
    StateName,
    TableError,
    UnknownStateError,
)

logger = logging.getLogger("fsa_rules.machine")

# State table input: a mapping or an ordered iterable of (name, definition).
Table = Union[Mapping[StateName, Any], Iterable[tuple[StateName, Any]]]

# A state given by name or as the State object itself.
StateRef = Union[StateName, State]

_DEFINITION_KEYS = ("on_enter", "do", "on_exit", "rules")


@dataclass
class Visit:
    """One history entry: the state entered plus its result/message slots."""

    name: StateName
    result: Any = None
    message: Any = None


class Machine:
    """A finite state machine built from an ordered state table.

    The first declared state is the start state. Rules are resolved in a
    second pass so states may refer to states declared later, to
    themselves, or to each other.
    """

    def __init__(self, table: Table, config: MachineConfig | None = None) -> None:
        self._states: dict[StateName, State] = {}
        self._order: list[State] = []
        self._current: State | None = None
        self._history: list[Visit] = []
        self._notes: dict[Any, Any] = {}
        self._done: DonePredicate = constant(False)
        self._strict: bool = False

        pending: list[tuple[State, Any]] = []
        for name, definition in _table_items(table):
            try:
                exists = name in self._states
            except TypeError:
                raise TableError(f"State names must be hashable, got {name!r}") from None
            if exists:
                raise DuplicateStateError(name)
            definition = _check_definition(name, definition)
            state = State(
                name,
                self,
                on_enter=as_actions(definition.get("on_enter"), f'on_enter of state "{name}"'),
                do=as_actions(definition.get("do"), f'do of state "{name}"'),
                on_exit=as_actions(definition.get("on_exit"), f'on_exit of state "{name}"'),
            )
            self._states[name] = state
            self._order.append(state)
            pending.append((state, definition.get("rules")))

        for state, spec in pending:
            rules: list[Rule] = []
            for target_name, rule_spec in rule_pairs(state.name, spec):
                target = self._find(target_name)
                if target is None:
                    raise UnknownStateError(target_name, state.name)
                rules.append(make_rule(state.name, target, rule_spec))
            state._rules = tuple(rules)

        logger.debug(
            "Built machine with %d states and %d rules",
            len(self._order), sum(len(s.rules) for s in self._order),
        )

        if config is not None:
            self.strict = config.strict
            self.done = config.done
            if config.start:
                self.start()

    def __repr__(self) -> str:
        current = self._current.name if self._current is not None else None
        return f"Machine(states={len(self._order)}, current={current!r})"

    # -- Configuration --

    @property
    def strict(self) -> bool:
        return self._strict

    @strict.setter
    def strict(self, value: bool) -> None:
        self._strict = bool(value)

    @property
    def done(self) -> Any:
        """Evaluate the done value. Callables receive the machine."""
        return self._done(self)

    @done.setter
    def done(self, value: Any) -> None:
        self._done = value if callable(value) else constant(value)

    @property
    def notes(self) -> dict[Any, Any]:
        """Free-form storage shared by all states. Cleared by reset()."""
        return self._notes

    # -- State access --

    @property
    def current_state(self) -> State | None:
        return self._current

    @property
    def previous_state(self) -> State | None:
        if len(self._history) < 2:
            return None
        return self._states[self._history[-2].name]

    def states(self, *names: StateRef) -> list[State]:
        """Return all states in declaration order, or just the named ones."""
        if not names:
            return list(self._order)
        return [self._resolve(name) for name in names]

    def start(self) -> State | None:
        """Enter the first declared state. Returns None for an empty table."""
        if not self._order:
            return None
        return self._enter(self._order[0])

    def set_state(self, state: StateRef) -> State:
        """Jump directly to a state. No rule is evaluated and no transition
        actions run; exit, enter and do actions run as usual.
        """
        target = self._resolve(state)
        return self._enter(target)

    # -- Transitions --

    def try_switch(self, *args: Any) -> State | None:
        """Evaluate the current state's rules and switch if one matches.

        Extra arguments are passed to every predicate after the state.
        Returns the new current state, or None when no rule matched.
        """
        state = self._require_current()
        if self._strict:
            matches = [rule for rule in state.rules if rule.check(state, *args)]
            if len(matches) > 1:
                raise AmbiguousTransitionError(
                    state.name, [rule.target.name for rule in matches]
                )
            rule = matches[0] if matches else None
        else:
            rule = None
            for candidate in state.rules:
                if candidate.check(state, *args):
                    rule = candidate
                    break

        if rule is None:
            logger.debug('No transition from state "%s"', state.name)
            return None
        logger.debug('Switching from "%s" to "%s"', state.name, rule.target.name)
        return self._enter(rule.target, rule)

    def switch(self, *args: Any) -> State:
        """Like try_switch(), but raises NoTransitionError if nothing matched."""
        new_state = self.try_switch(*args)
        if new_state is None:
            raise NoTransitionError(self._require_current().name)
        return new_state

    # -- Run loop --

    def steps(self, *args: Any) -> Generator[State, None, None]:
        """Yield each state entered until done is truthy.

        Starts the machine first if it has no current state. Callers can
        stop iterating between any two switches.
        """
        if self._current is None:
            started = self.start()
            if started is not None:
                yield started
        while not self.done:
            yield self.switch(*args)

    def run(self, *args: Any) -> State | None:
        """Switch until done. There is no step limit."""
        for _ in self.steps(*args):
            pass
        return self._current

    def reset(self) -> None:
        """Forget the current state, history and notes. Keeps the table,
        done and strict.
        """
        self._current = None
        self._history.clear()
        for state in self._order:
            state._index.clear()
        self._notes.clear()
        logger.debug("Machine reset")

    # -- Results and messages --

    def set_result(self, value: Any) -> None:
        self._require_current().result = value

    def set_message(self, value: Any) -> None:
        self._require_current().message = value

    def result(self, state: StateRef | None = None) -> Any:
        """Latest result of ``state``, or of the current visit if omitted."""
        owner = self._current if state is None else self._resolve(state)
        return owner.result if owner is not None else None

    def message(self, state: StateRef | None = None) -> Any:
        """Latest message of ``state``, or of the current visit if omitted."""
        owner = self._current if state is None else self._resolve(state)
        return owner.message if owner is not None else None

    def results(self, state: StateRef) -> list[Any]:
        """Every result recorded for ``state``, oldest first."""
        return self._resolve(state).results()

    def messages(self, state: StateRef) -> list[Any]:
        """Every message recorded for ``state``, oldest first."""
        return self._resolve(state).messages()

    @property
    def last_result(self) -> Any:
        return self.result()

    @property
    def last_message(self) -> Any:
        return self.message()

    # -- History --

    def stack(self) -> list[StateName]:
        """Names of every state entered since construction or reset()."""
        return [visit.name for visit in self._history]

    def raw_history(self) -> list[tuple[StateName, dict[str, Any]]]:
        return [
            (visit.name, {"result": visit.result, "message": visit.message})
            for visit in self._history
        ]

    def table(self) -> list[dict[str, Any]]:
        """Static snapshot of states and their rules. Holds no runtime data."""
        return [
            {
                "name": state.name,
                "rules": [
                    {"target": rule.target.name, "label": rule.label}
                    for rule in state.rules
                ],
            }
            for state in self._order
        ]

    # -- Internals --

    def _enter(self, state: State, rule: Rule | None = None) -> State:
        source = self._current
        if source is not None:
            source.exit()
        if rule is not None:
            run_actions(rule.actions, source, state)

        self._history.append(Visit(state.name))
        state._index.append(len(self._history) - 1)
        self._current = state
        logger.debug('Entered state "%s" (visit %d)', state.name, state.visits)

        state.enter()
        state.do_actions()
        return state

    def _find(self, ref: StateRef) -> State | None:
        if isinstance(ref, State):
            return ref if ref.machine is self else None
        try:
            return self._states.get(ref)
        except TypeError:
            return None

    def _resolve(self, ref: StateRef) -> State:
        state = self._find(ref)
        if state is None:
            name = ref.name if isinstance(ref, State) else ref
            raise UnknownStateError(name)
        return state

    def _require_current(self) -> State:
        if self._current is None:
            raise NotStartedError("The machine has not been started")
        return self._current


def _table_items(table: Table) -> list[tuple[StateName, Any]]:
    if isinstance(table, Mapping):
        return list(table.items())
    if isinstance(table, (str, bytes)) or not isinstance(table, Iterable):
        raise TableError(
            "State table must be a mapping or a sequence of (name, definition) "
            f"pairs, got {type(table).__name__}"
        )
    items: list[tuple[StateName, Any]] = []
    for i, item in enumerate(table):
        if not isinstance(item, (list, tuple)) or len(item) != 2:
            raise TableError(f"Table entry {i} is not a (name, definition) pair: {item!r}")
        items.append((item[0], item[1]))
    return items


def _check_definition(name: StateName, definition: Any) -> Mapping[str, Any]:
    if definition is None:
        return {}
    if not isinstance(definition, Mapping):
        raise TableError(
            f'Definition of state "{name}" must be a mapping, '
            f"got {type(definition).__name__}"
        )
    unknown = [key for key in definition if key not in _DEFINITION_KEYS]
    if unknown:
        raise TableError(
            f'Definition of state "{name}" has unknown keys: '
            + ", ".join(repr(key) for key in unknown)
        )
    return definition
