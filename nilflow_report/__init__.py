"""
nilflow_report — Grouping and rendering of nil-panic reports
============================================================

A single nil source routinely produces many reports, one per place the
nil value is dereferenced. This package merges reports that share a nil
source into one primary report that lists the other places.

Core modules
------------
flow
    SourceLocation, FlowStep and NilFlow records.
conflict
    The Conflict record and the report renderer.
keys
    Grouping keys (structural, producer, heuristic).
scope
    Enclosing-function lookup used to disambiguate heuristic keys.
grouping
    Single-pass conflict aggregation.

Supporting modules
------------------
program, config, engine, dump, errors, main

Quick start
-----------
>>> from nilflow_report import Conflict, NilFlow, FlowStep, SourceLocation
>>> from nilflow_report import group_conflicts, render
>>> grouped = group_conflicts(conflicts)
>>> print(render(grouped[0]))
"""

from __future__ import annotations

import logging

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

from nilflow_report.flow import FlowStep, NilFlow, SourceLocation, path_string  # noqa: E402
from nilflow_report.conflict import Conflict, render  # noqa: E402
from nilflow_report.keys import (  # noqa: E402
    GroupingKey,
    HeuristicKey,
    ProducerKey,
    StructuralKey,
    derive_key,
)
from nilflow_report.program import (  # noqa: E402
    Declaration,
    ProgramView,
    SourceFile,
    StaticProgramView,
)
from nilflow_report.config import Config  # noqa: E402
from nilflow_report.scope import FunctionResolver, find_enclosing_function_name  # noqa: E402
from nilflow_report.grouping import group_conflicts  # noqa: E402
from nilflow_report.engine import Diagnostic, DiagnosticEngine  # noqa: E402

__all__ = [
    "__version__",
    "Config",
    "Conflict",
    "Declaration",
    "Diagnostic",
    "DiagnosticEngine",
    "FlowStep",
    "FunctionResolver",
    "GroupingKey",
    "HeuristicKey",
    "NilFlow",
    "ProducerKey",
    "ProgramView",
    "SourceFile",
    "SourceLocation",
    "StaticProgramView",
    "StructuralKey",
    "derive_key",
    "find_enclosing_function_name",
    "group_conflicts",
    "path_string",
    "render",
]
