"""Tests for history formatting."""
from fsa_rules import Machine, format_history


def test_empty_history():
    assert format_history([]) == ""


def test_blocks_per_visit():
    machine = Machine({"foo": {"rules": [("bar", 1)]}, "bar": {"rules": [("bar", 1)]}})
    machine.start()
    machine.set_result("a")
    machine.set_message("some message")
    machine.switch()
    machine.set_result(2)

    text = format_history(machine.raw_history())

    assert text == (
        "State: foo\n"
        "{'message': 'some message', 'result': 'a'}\n"
        "\n"
        "State: bar\n"
        "{'message': None, 'result': 2}\n"
        "\n"
    )


def test_formatting_does_not_touch_machine():
    machine = Machine({"a": None})
    machine.start()
    before = machine.raw_history()
    format_history(machine.raw_history())
    assert machine.raw_history() == before
