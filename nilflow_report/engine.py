"""
nilflow_report/engine.py
════════════════════════

Turns the inference engine's raw conflicts into report diagnostics.

Pipeline
────────

  raw conflicts
      │  Config.is_reported        drop positions outside the reported files
      ▼
  group_conflicts                  (when group_error_messages is set)
      │
      ▼
  render                           one Diagnostic per primary conflict

Usage
─────
    >>> engine = DiagnosticEngine(program, Config(), cwd="/src/app")
    >>> for diag in engine.process(conflicts):
    ...     print(diag.to_gcc_format())
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from termcolor import colored

from nilflow_report.config import Config
from nilflow_report.conflict import HEADLINE, Conflict, render
from nilflow_report.flow import SourceLocation
from nilflow_report.grouping import group_conflicts
from nilflow_report.program import ProgramView, StaticProgramView
from nilflow_report.scope import FunctionResolver, PathLike

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Diagnostic:
    """
    A rendered report entry.

    Attributes
    ----------
    position : Report location of the primary conflict
    message  : Rendered message, including the "other places" summary
    conflict : The primary conflict the message was rendered from
    """
    position: SourceLocation
    message: str
    conflict: Conflict

    @property
    def similar_count(self) -> int:
        return len(self.conflict.similar_conflicts)

    def to_json(self) -> Dict[str, Any]:
        return {
            "file": self.position.file,
            "line": self.position.line,
            "column": self.position.column,
            "message": self.message,
            "similar_count": self.similar_count,
            "similar": [
                str(s.dereference_position())
                for s in self.conflict.similar_conflicts
            ],
        }

    def to_json_str(self) -> str:
        return json.dumps(self.to_json())

    def to_gcc_format(self) -> str:
        return f"{self.position}: error: {self.message.rstrip()}"

    def to_pretty(self) -> str:
        pos = colored(str(self.position), attrs=["bold"])
        label = colored("error:", "red", attrs=["bold"])
        body = self.message.rstrip()
        if body.startswith(HEADLINE):
            body = colored(HEADLINE.rstrip(), "red") + " " + body[len(HEADLINE):]
        return f"{pos}: {label} {body}"


class DiagnosticEngine:
    """Filters, groups and renders conflicts for one analysis run."""

    def __init__(
        self,
        program: Optional[ProgramView] = None,
        config: Optional[Config] = None,
        cwd: Optional[PathLike] = None,
    ) -> None:
        self.program = program if program is not None else StaticProgramView()
        self.config = config or Config()
        self.resolver = FunctionResolver(self.program, self.config, cwd)

    def select(self, conflicts: Sequence[Conflict]) -> List[Conflict]:
        """Conflicts whose position the configuration reports."""
        kept = [c for c in conflicts if self.config.is_reported(c.position)]
        if len(kept) != len(conflicts):
            logger.info(
                "Dropped %d conflicts outside the reported files",
                len(conflicts) - len(kept),
            )
        return kept

    def process(self, conflicts: Sequence[Conflict]) -> List[Diagnostic]:
        selected = self.select(conflicts)
        if self.config.group_error_messages:
            selected = group_conflicts(selected, self.resolver)
        logger.info(
            "Reporting %d diagnostics for %d conflicts",
            len(selected), len(conflicts),
        )
        return [
            Diagnostic(position=c.position, message=render(c), conflict=c)
            for c in selected
        ]


__all__ = [
    "Diagnostic",
    "DiagnosticEngine",
]
