"""Ping Pong -- two states bouncing a ball through shared notes.

Demonstrates:
- Declaring a state table with on_enter/do/on_exit actions
- Rules given as a predicate plus a transition action
- Stopping the run loop with a done predicate
- Printing the visit history with format_history

Run: python -m examples.ping_pong
"""

import logging

from fsa_rules import Machine, format_history
from fsa_rules.state import State


def serve(state: State) -> None:
    notes = state.machine.notes
    notes["hits"] = notes.get("hits", 0) + 1
    notes["goto"] = "pong" if state.name == "ping" else "ping"
    state.result = notes["hits"]
    print(f"  {state.name}!")


def main() -> None:
    logging.basicConfig(level=logging.DEBUG, format="%(name)s | %(message)s")
    print("=== Ping Pong ===\n")

    machine = Machine({
        "ping": {
            "on_enter": lambda s: print("  entering ping"),
            "do": serve,
            "rules": [
                ("pong", lambda s: s.machine.notes["goto"] == "pong"),
            ],
        },
        "pong": {
            "do": serve,
            "on_exit": lambda s: print("  leaving pong"),
            "rules": [
                ("ping", [
                    lambda s: s.machine.notes["goto"] == "ping",
                    lambda src, dst: print(f"  {src.name} to {dst.name}"),
                ]),
            ],
        },
    })

    # Stop after the ball has been hit six times.
    machine.done = lambda m: m.notes.get("hits", 0) >= 6
    machine.run()

    print(f"\nVisited: {machine.stack()}\n")
    print(format_history(machine.raw_history()))


if __name__ == "__main__":
    main()
