"""
nilflow_report/flow.py
══════════════════════

Data model for nil flows as produced by the inference engine.

A nil flow is an ordered pair of step sequences:

  nil_path     — how a nil value travels through the program
  nonnil_path  — the terminal step(s) where it is unsafely consumed

Only a few fields are read by the grouping layer: the serialized form of
``nil_path`` (structural grouping key) and the consumer location of the
last ``nonnil_path`` step (the "other places" summary).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Tuple

_NO_POS = "<no pos info>"


@dataclass(frozen=True)
class SourceLocation:
    """
    A point in a source file.

    ``file`` is relative to the analysis working directory, ``offset`` is
    the byte offset used for range containment against declarations.
    A location is valid when its line number is positive.
    """
    file: str = ""
    line: int = 0
    column: int = 0
    offset: int = -1

    def is_valid(self) -> bool:
        return self.line > 0

    def __str__(self) -> str:
        s = self.file
        if self.is_valid():
            if s:
                s += ":"
            s += str(self.line)
            if self.column:
                s += f":{self.column}"
        return s or "-"


@dataclass(frozen=True)
class FlowStep:
    """One edge of a nil flow."""
    producer_position: SourceLocation = field(default_factory=SourceLocation)
    producer_repr: str = ""
    consumer_position: SourceLocation = field(default_factory=SourceLocation)
    consumer_repr: str = ""

    def reason(self) -> str:
        if self.producer_repr and self.consumer_repr:
            return f"{self.producer_repr} {self.consumer_repr}"
        return self.producer_repr or self.consumer_repr

    def __str__(self) -> str:
        pos = _NO_POS
        if self.consumer_position.is_valid():
            pos = str(self.consumer_position)
        return f"\t-> {pos}: {self.reason()}"


def path_string(steps: Iterable[FlowStep]) -> str:
    """Serialize a step sequence, preserving order."""
    return "".join(str(s) for s in steps)


@dataclass(frozen=True)
class NilFlow:
    nil_path: Tuple[FlowStep, ...] = ()
    nonnil_path: Tuple[FlowStep, ...] = ()

    def __post_init__(self) -> None:
        # Accept lists from callers; keep the record hashable.
        object.__setattr__(self, "nil_path", tuple(self.nil_path))
        object.__setattr__(self, "nonnil_path", tuple(self.nonnil_path))

    @property
    def steps(self) -> Tuple[FlowStep, ...]:
        return self.nil_path + self.nonnil_path

    def __str__(self) -> str:
        return "\n" + "\n".join(str(s) for s in self.steps)


__all__ = [
    "SourceLocation",
    "FlowStep",
    "NilFlow",
    "path_string",
]
