"""Tests for action-list normalization."""
import pytest

from fsa_rules.actions import as_actions, run_actions
from fsa_rules.types import TableError


def _a(state):
    pass


def _b(state):
    pass


class TestAsActions:
    """Every accepted shape becomes a tuple of callables."""

    def test_none_is_empty(self):
        assert as_actions(None) == ()

    def test_single_callable(self):
        assert as_actions(_a) == (_a,)

    def test_list_keeps_order(self):
        assert as_actions([_b, _a]) == (_b, _a)

    def test_tuple_and_generator(self):
        assert as_actions((_a, _b)) == (_a, _b)
        assert as_actions(fn for fn in [_a]) == (_a,)

    def test_empty_list(self):
        assert as_actions([]) == ()

    def test_string_rejected(self):
        with pytest.raises(TableError, match="must be a callable"):
            as_actions("not an action")

    def test_scalar_rejected(self):
        with pytest.raises(TableError):
            as_actions(42)

    def test_non_callable_item_rejected(self):
        with pytest.raises(TableError, match="item 1 is not callable"):
            as_actions([_a, 3], where="on_enter")


def test_run_actions_passes_arguments_in_order():
    log = []
    actions = (lambda *a: log.append(("first", a)), lambda *a: log.append(("second", a)))
    run_actions(actions, "x", "y")
    assert log == [("first", ("x", "y")), ("second", ("x", "y"))]
