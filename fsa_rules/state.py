"""State - a named node with lifecycle actions and ordered rules."""
from __future__ import annotations

import weakref
from typing import TYPE_CHECKING, Any

from fsa_rules.actions import run_actions
from fsa_rules.types import Action, FSAError, StateName

if TYPE_CHECKING:
    from fsa_rules.machine import Machine, Visit
    from fsa_rules.rules import Rule


class State:
    """A state owned by a Machine.

    Holds only a weak reference back to its machine. ``result`` and
    ``message`` address the slot of the latest visit to this state;
    ``results()`` and ``messages()`` return every visit, oldest first.
    """

    def __init__(
        self,
        name: StateName,
        machine: Machine,
        on_enter: tuple[Action, ...] = (),
        do: tuple[Action, ...] = (),
        on_exit: tuple[Action, ...] = (),
    ) -> None:
        self._name = name
        self._machine_ref = weakref.ref(machine)
        self._on_enter = on_enter
        self._do = do
        self._on_exit = on_exit
        self._rules: tuple[Rule, ...] = ()
        # Positions in the machine history where this state was entered.
        self._index: list[int] = []

    def __repr__(self) -> str:
        return f"State({self._name!r})"

    @property
    def name(self) -> StateName:
        return self._name

    @property
    def machine(self) -> Machine | None:
        return self._machine_ref()

    @property
    def on_enter(self) -> tuple[Action, ...]:
        return self._on_enter

    @property
    def do(self) -> tuple[Action, ...]:
        return self._do

    @property
    def on_exit(self) -> tuple[Action, ...]:
        return self._on_exit

    @property
    def rules(self) -> tuple[Rule, ...]:
        return self._rules

    @property
    def visits(self) -> int:
        """Number of times the state was entered since the last reset."""
        return len(self._index)

    # -- Lifecycle --

    def enter(self) -> None:
        run_actions(self._on_enter, self)

    def do_actions(self) -> None:
        run_actions(self._do, self)

    def exit(self) -> None:
        run_actions(self._on_exit, self)

    # -- Per-visit slots --

    @property
    def result(self) -> Any:
        return self._slot("result")

    @result.setter
    def result(self, value: Any) -> None:
        self._latest_visit().result = value

    @property
    def message(self) -> Any:
        return self._slot("message")

    @message.setter
    def message(self, value: Any) -> None:
        self._latest_visit().message = value

    def results(self) -> list[Any]:
        return self._slots("result")

    def messages(self) -> list[Any]:
        return self._slots("message")

    def _visits(self) -> list[Visit]:
        machine = self._require_machine()
        history = machine._history
        return [history[i] for i in self._index]

    def _latest_visit(self) -> Visit:
        if not self._index:
            raise FSAError(f'State "{self._name}" has not been entered')
        return self._require_machine()._history[self._index[-1]]

    def _slot(self, slot: str) -> Any:
        if not self._index:
            return None
        return getattr(self._latest_visit(), slot)

    def _slots(self, slot: str) -> list[Any]:
        return [getattr(v, slot) for v in self._visits()]

    def _require_machine(self) -> Machine:
        machine = self._machine_ref()
        if machine is None:
            raise FSAError(f'State "{self._name}" outlived its machine')
        return machine
