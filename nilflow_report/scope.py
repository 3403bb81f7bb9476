"""
nilflow_report/scope.py
═══════════════════════

Enclosing-function lookup for conflict positions.

Two conflicts in different functions can render to byte-identical
producer/consumer text. The function name containing a conflict's report
position is used to tell them apart (see :mod:`nilflow_report.keys`).

Only top-level function declarations are searched; a position inside a
closure resolves to the declaration that contains the closure.
"""

from __future__ import annotations

from pathlib import PurePath
from typing import Iterable, Optional, Union

from nilflow_report.config import Config
from nilflow_report.conflict import Conflict
from nilflow_report.flow import SourceLocation
from nilflow_report.program import ProgramView, SourceFile

PathLike = Union[str, PurePath]


def relative_filename(path: str, cwd: Optional[PathLike]) -> str:
    """*path* relative to *cwd*; unchanged if it cannot be made relative."""
    if cwd is None:
        return path
    try:
        return str(PurePath(path).relative_to(cwd))
    except ValueError:
        return path


def find_enclosing_function_name(
    position: SourceLocation,
    files: Iterable[SourceFile],
    cwd: Optional[PathLike] = None,
) -> Optional[str]:
    """
    Name of the first function declaration whose range holds *position*.

    Parameters
    ----------
    position : Conflict report position (file relative to *cwd*, byte offset)
    files    : The in-scope files to search
    cwd      : Working directory the report positions are relative to

    Returns ``None`` when no function contains the offset, e.g. package-level
    initialization code.
    """
    for source_file in files:
        if relative_filename(source_file.path, cwd) != position.file:
            continue
        for decl in source_file.functions():
            if decl.contains(position.offset):
                return decl.name
    return None


class FunctionResolver:
    """
    Callable adapter from a conflict to its enclosing function name.

    Binds a program view, the scope configuration and the working
    directory so that key derivation only needs ``resolver(conflict)``.
    """

    def __init__(
        self,
        program: ProgramView,
        config: Optional[Config] = None,
        cwd: Optional[PathLike] = None,
    ) -> None:
        self.program = program
        self.config = config or Config()
        self.cwd = cwd

    def in_scope_files(self) -> Iterable[SourceFile]:
        return (f for f in self.program.files() if self.config.is_file_in_scope(f))

    def __call__(self, conflict: Conflict) -> Optional[str]:
        return find_enclosing_function_name(
            conflict.position, self.in_scope_files(), self.cwd
        )


def no_function(conflict: Conflict) -> Optional[str]:
    """Resolver for callers without a program view."""
    return None


__all__ = [
    "FunctionResolver",
    "find_enclosing_function_name",
    "no_function",
    "relative_filename",
]
