"""
nilflow_report/conflict.py
══════════════════════════

Conflict record and report renderer.

A conflict is one potential nil panic. After grouping, a primary conflict
carries the later conflicts that share its nil source in
``similar_conflicts``; those entries never carry similar conflicts of their
own.

Rendered form
─────────────

    Potential nil panic detected. Observed nil flow from source to
    dereference point: <flow>

    (The same nil source may also cause potential nil panics in 2 other
    places: "a.go:3:4" and "b.go:7:1".)
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import List, Sequence

from nilflow_report.flow import NilFlow, SourceLocation

HEADLINE = (
    "Potential nil panic detected. "
    "Observed nil flow from source to dereference point: "
)


@dataclass
class Conflict:
    """
    A reported potential nil panic.

    Attributes
    ----------
    position          : Report location, independent of the producing package
    flow              : Nil flow from source to dereference point
    similar_conflicts : Later conflicts sharing this conflict's nil source
    """
    position: SourceLocation
    flow: NilFlow
    similar_conflicts: List["Conflict"] = field(default_factory=list)

    def add_similar_conflict(self, other: "Conflict") -> None:
        # Store a copy with no nested group of its own.
        self.similar_conflicts.append(
            dataclasses.replace(other, similar_conflicts=[])
        )

    def dereference_position(self) -> SourceLocation:
        """Consumer location of the last non-nil step, or the report position."""
        if not self.flow.nonnil_path:
            return self.position
        return self.flow.nonnil_path[-1].consumer_position

    def __str__(self) -> str:
        return render(self)


def join_positions(quoted: Sequence[str]) -> str:
    """Join already-quoted positions with commas and a final ``and``."""
    if not quoted:
        return ""
    head = ", ".join(quoted[:-1])
    if len(quoted) > 1:
        # "a" and "b"  /  "a", "b", and "c"
        head += ", and " if len(quoted) > 2 else " and "
    return head + quoted[-1]


def render(conflict: Conflict) -> str:
    """Format one (possibly merged) conflict as a user-facing message."""
    suffix = ""
    if conflict.similar_conflicts:
        quoted = [
            f'"{s.dereference_position()}"' for s in conflict.similar_conflicts
        ]
        suffix = (
            "\n\n(The same nil source may also cause potential nil panics in "
            f"{len(quoted)} other places: {join_positions(quoted)}.)"
        )
    return f"{HEADLINE}{conflict.flow}{suffix}\n"


__all__ = [
    "Conflict",
    "HEADLINE",
    "join_positions",
    "render",
]
