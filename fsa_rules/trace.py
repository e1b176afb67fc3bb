"""Human-readable rendering of a machine's history."""
from __future__ import annotations

import pprint
from typing import Any, Iterable


def format_history(history: Iterable[tuple[Any, dict[str, Any]]]) -> str:
    """Render ``Machine.raw_history()`` as one labelled block per visit.

    Each block is ``State: <name>`` followed by the pretty-printed slot
    dict and a blank line.
    """
    blocks: list[str] = []
    for name, slots in history:
        blocks.append(f"State: {name}\n{pprint.pformat(slots, indent=1, width=60)}\n\n")
    return "".join(blocks)
