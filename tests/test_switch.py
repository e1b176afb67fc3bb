"""Tests for transition selection in default and strict modes."""
import pytest

from fsa_rules import (
    AmbiguousTransitionError,
    Machine,
    NoTransitionError,
    NotStartedError,
)


def _counting(result, calls, name):
    def predicate(state, *args):
        calls.append(name)
        return result
    return predicate


class TestShortCircuit:
    """Default mode fires the first matching rule and stops looking."""

    def test_first_match_wins(self):
        # Arrange
        calls = []
        machine = Machine({
            "idle": {"rules": [
                ("a", _counting(False, calls, "a")),
                ("b", _counting(True, calls, "b")),
                ("c", _counting(True, calls, "c")),
            ]},
            "a": None, "b": None, "c": None,
        })
        machine.start()

        # Act
        state = machine.try_switch()

        # Assert
        assert state.name == "b"
        assert calls == ["a", "b"]

    def test_no_match_returns_none(self):
        machine = Machine({"idle": {"rules": [("other", 0)]}, "other": None})
        machine.start()
        assert machine.try_switch() is None
        assert machine.current_state.name == "idle"
        assert machine.stack() == ["idle"]

    def test_state_without_rules(self):
        machine = Machine({"only": None})
        machine.start()
        assert machine.try_switch() is None

    def test_arguments_forwarded_to_predicates(self):
        seen = []

        def predicate(state, *args):
            seen.append((state.name, args))
            return args[0] == "go"

        machine = Machine({"a": {"rules": [("b", predicate)]}, "b": None})
        machine.start()
        assert machine.try_switch("stop", 1) is None
        assert machine.try_switch("go", 2).name == "b"
        assert seen == [("a", ("stop", 1)), ("a", ("go", 2))]

    def test_not_started(self):
        machine = Machine({"a": {"rules": [("a", 1)]}})
        with pytest.raises(NotStartedError):
            machine.try_switch()
        with pytest.raises(NotStartedError):
            machine.switch()


class TestSwitch:
    """switch() is the raising form of try_switch()."""

    def test_switch_returns_new_state(self):
        machine = Machine({"a": {"rules": [("b", 1)]}, "b": None})
        machine.start()
        assert machine.switch() is machine.states("b")[0]

    def test_switch_raises_without_match(self):
        machine = Machine({"stuck": {"rules": [("stuck", 0)]}})
        machine.start()
        with pytest.raises(NoTransitionError, match='Cannot determine transition from state "stuck"') as exc:
            machine.switch()
        assert exc.value.state == "stuck"
        assert machine.stack() == ["stuck"]

    def test_exit_action_error_propagates(self):
        entered = []

        def fail(state):
            raise RuntimeError("boom")

        machine = Machine({
            "a": {"on_exit": fail, "rules": [("b", 1)]},
            "b": {"on_enter": entered.append},
        })
        machine.start()
        with pytest.raises(RuntimeError, match="boom"):
            machine.switch()
        assert machine.current_state.name == "a"
        assert machine.stack() == ["a"]
        assert entered == []


class TestLifecycleOrder:
    """exit -> transition actions -> history push -> enter -> do."""

    def test_order(self):
        log = []
        machine = Machine({
            "a": {
                "on_exit": lambda s: log.append(f"exit {s.name}"),
                "rules": [("b", [
                    lambda s: True,
                    lambda src, dst: log.append(f"transition {src.name}->{dst.name}"),
                    lambda src, dst: log.append(f"stack {src.machine.stack()}"),
                ])],
            },
            "b": {
                "on_enter": lambda s: log.append(f"enter {s.name}"),
                "do": lambda s: log.append(f"do {s.name}"),
            },
        })
        machine.start()
        machine.switch()
        assert log == [
            "exit a",
            "transition a->b",
            "stack ['a']",
            "enter b",
            "do b",
        ]

    def test_transition_actions_only_for_fired_rule(self):
        fired = []
        machine = Machine({
            "a": {"rules": [
                ("b", [False, lambda s, d: fired.append("b")]),
                ("c", [True, lambda s, d: fired.append("c")]),
            ]},
            "b": None, "c": None,
        })
        machine.start()
        machine.switch()
        assert fired == ["c"]

    def test_transition_actions_do_not_leak_into_set_state(self):
        fired = []
        machine = Machine({
            "a": {"rules": [("b", [True, lambda s, d: fired.append(d.name)])]},
            "b": None,
        })
        machine.start()
        machine.switch()
        machine.set_state("a")
        machine.set_state("b")
        assert fired == ["b"]

    def test_self_transition_runs_exit_and_enter(self):
        log = []
        machine = Machine({
            "loop": {
                "on_enter": lambda s: log.append("enter"),
                "on_exit": lambda s: log.append("exit"),
                "rules": [("loop", 1)],
            },
        })
        machine.start()
        machine.switch()
        assert log == ["enter", "exit", "enter"]
        assert machine.stack() == ["loop", "loop"]


class TestStrict:
    """Strict mode evaluates every rule and demands a single match."""

    def test_all_rules_evaluated(self):
        calls = []
        machine = Machine({
            "idle": {"rules": [
                ("a", _counting(True, calls, "a")),
                ("b", _counting(False, calls, "b")),
                ("c", _counting(False, calls, "c")),
            ]},
            "a": None, "b": None, "c": None,
        })
        machine.strict = True
        machine.start()
        assert machine.switch().name == "a"
        assert calls == ["a", "b", "c"]

    def test_ambiguous_reports_every_candidate(self):
        exits = []
        machine = Machine({
            "idle": {
                "on_exit": exits.append,
                "rules": [("a", 1), ("b", 0), ("c", 1), ("d", 1)],
            },
            "a": None, "b": None, "c": None, "d": None,
        })
        machine.strict = True
        machine.start()

        with pytest.raises(AmbiguousTransitionError) as exc:
            machine.try_switch()

        assert exc.value.state == "idle"
        assert exc.value.candidates == ("a", "c", "d")
        message = str(exc.value)
        assert '"idle"' in message
        assert '"a", "c", "d"' in message
        assert exits == []
        assert machine.current_state.name == "idle"
        assert machine.stack() == ["idle"]

    def test_switch_also_raises_ambiguity(self):
        machine = Machine({"idle": {"rules": [("idle", 1), ("idle", 1)]}})
        machine.strict = True
        machine.start()
        with pytest.raises(AmbiguousTransitionError):
            machine.switch()

    def test_no_match(self):
        machine = Machine({"idle": {"rules": [("idle", 0)]}})
        machine.strict = True
        machine.start()
        assert machine.try_switch() is None
        with pytest.raises(NoTransitionError):
            machine.switch()

    def test_predicate_error_propagates(self):
        exits = []

        def broken(state):
            raise ValueError("bad input")

        machine = Machine({
            "idle": {"on_exit": exits.append, "rules": [("a", 1), ("b", broken)]},
            "a": None, "b": None,
        })
        machine.strict = True
        machine.start()
        with pytest.raises(ValueError, match="bad input"):
            machine.switch()
        assert exits == []
        assert machine.current_state.name == "idle"
        assert machine.stack() == ["idle"]

    def test_toggle_back_to_short_circuit(self):
        machine = Machine({"idle": {"rules": [("a", 1), ("b", 1)]}, "a": None, "b": None})
        machine.strict = True
        machine.strict = False
        machine.start()
        assert machine.switch().name == "a"
