"""
nilflow_report/program.py
═════════════════════════

Read-only view of the analyzed program.

The grouping layer only needs, per analyzed file, its path and its
top-level declarations with byte-offset ranges. Any program-representation
provider can be plugged in by satisfying :class:`ProgramView`;
:class:`StaticProgramView` is the in-memory implementation used by the
dump loader and the tests.
"""

from __future__ import annotations

import bisect
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional, Protocol, Tuple

# Declaration kinds that open a function scope.
FUNCTION_KINDS: FrozenSet[str] = frozenset({"func", "method"})


@dataclass(frozen=True)
class Declaration:
    """A top-level declaration and its inclusive byte-offset range."""
    name: str
    kind: str = "func"
    start: int = 0
    end: int = 0

    @property
    def is_function(self) -> bool:
        return self.kind in FUNCTION_KINDS

    def contains(self, offset: int) -> bool:
        return self.start <= offset <= self.end


@dataclass(frozen=True)
class SourceFile:
    """
    One analyzed source file.

    ``path`` is the file name as the provider reports it (usually absolute);
    ``package`` is the import path of the enclosing package and ``docstring``
    the leading file comment, both consulted by the scope configuration.
    """
    path: str
    declarations: Tuple[Declaration, ...] = ()
    package: str = ""
    docstring: str = ""
    line_starts: Tuple[int, ...] = field(default=(), compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "declarations", tuple(self.declarations))
        object.__setattr__(self, "line_starts", tuple(self.line_starts))

    def functions(self) -> Iterator[Declaration]:
        return (d for d in self.declarations if d.is_function)

    def offset_of(self, line: int, column: int) -> Optional[int]:
        """Byte offset of a 1-based (line, column), if line starts are known."""
        if not (0 < line <= len(self.line_starts)):
            return None
        return self.line_starts[line - 1] + max(column - 1, 0)

    def position_of(self, offset: int) -> Optional[Tuple[int, int]]:
        """1-based (line, column) of a byte offset, if line starts are known."""
        if not self.line_starts or offset < 0:
            return None
        line = max(bisect.bisect_right(self.line_starts, offset) - 1, 0)
        return line + 1, offset - self.line_starts[line] + 1


class ProgramView(Protocol):
    """Capability required from a program-representation provider."""

    def files(self) -> Iterable[SourceFile]:
        ...


class StaticProgramView:
    """In-memory :class:`ProgramView` over a fixed list of files."""

    def __init__(self, files: Optional[Iterable[SourceFile]] = None) -> None:
        self._files: Dict[str, SourceFile] = {}
        for f in files or ():
            self.add(f)

    def add(self, source_file: SourceFile) -> None:
        self._files[source_file.path] = source_file

    def files(self) -> List[SourceFile]:
        return list(self._files.values())

    def get(self, path: str) -> Optional[SourceFile]:
        return self._files.get(path)

    def __len__(self) -> int:
        return len(self._files)

    def __repr__(self) -> str:
        return f"StaticProgramView(files={len(self._files)})"


def line_starts_of(text: str) -> Tuple[int, ...]:
    """
    Byte offsets at which each line of *text* begins.

    Only ``\n`` ends a line; a line start at the very end of the text is
    not recorded.
    """
    data = text.encode("utf-8")
    starts = [0]
    pos = 0
    for chunk in data.split(b"\n")[:-1]:
        pos += len(chunk) + 1
        if pos < len(data):
            starts.append(pos)
    return tuple(starts)


__all__ = [
    "FUNCTION_KINDS",
    "Declaration",
    "SourceFile",
    "ProgramView",
    "StaticProgramView",
    "line_starts_of",
]
