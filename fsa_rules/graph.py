"""Graphviz rendering of a machine's static state table.

Requires the optional ``graphviz`` dependency (``pip install fsa-rules[graph]``).
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

from graphviz import Digraph

if TYPE_CHECKING:
    from fsa_rules.machine import Machine


def to_graphviz(machine: Machine, **attrs: Any) -> Digraph:
    """Build a Digraph with one node per state and one edge per rule.

    Edge labels come from rule labels; unlabeled rules get no label. The
    start state is drawn with a double outline. Only the table is read,
    never the current state or history. Extra keyword arguments are
    passed to ``Digraph``.
    """
    g = Digraph(**attrs)
    table = machine.table()
    for i, entry in enumerate(table):
        node_attrs = {"peripheries": "2"} if i == 0 else {}
        g.node(str(entry["name"]), **node_attrs)
    for entry in table:
        for rule in entry["rules"]:
            label = rule["label"]
            if label is None:
                g.edge(str(entry["name"]), str(rule["target"]))
            else:
                g.edge(str(entry["name"]), str(rule["target"]), label=label)
    return g
