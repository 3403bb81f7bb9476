"""
nilflow_report/dump.py
══════════════════════

Reads conflict dumps written by the inference engine.

Document layout::

    {
      "files": [
        {"path": "/src/app/main.go", "package": "example.com/app",
         "docstring": "", "source": "...optional file text...",
         "declarations": [{"name": "f1", "kind": "func",
                           "start": 14, "end": 96}]}
      ],
      "conflicts": [
        {"position": {"file": "main.go", "line": 3, "column": 7,
                      "offset": 40},
         "flow": {"nil_path": [<step>, ...], "nonnil_path": [<step>, ...]}}
      ]
    }

    <step> = {"producer_position": <pos>, "producer_repr": "...",
              "consumer_position": <pos>, "consumer_repr": "..."}

Every position field is optional. A conflict position without an offset
gets one from its file's line table when the file carries ``source``.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Mapping, Optional, Tuple, Union

from nilflow_report.conflict import Conflict
from nilflow_report.errors import DumpFormatError, ErrorCode
from nilflow_report.flow import FlowStep, NilFlow, SourceLocation
from nilflow_report.program import Declaration, SourceFile, StaticProgramView, line_starts_of
from nilflow_report.scope import PathLike, relative_filename

logger = logging.getLogger(__name__)


@dataclass
class Dump:
    program: StaticProgramView
    conflicts: List[Conflict]


# ── field helpers ────────────────────────────────────────────────────

def _field(obj: Mapping[str, Any], name: str, kind: type, where: str,
           default: Any = None, required: bool = False) -> Any:
    if name not in obj:
        if required:
            raise DumpFormatError(
                f"missing field {name!r}",
                code=ErrorCode.MISSING_FIELD,
                where=where,
            )
        return default
    value = obj[name]
    # bool is an int subclass; a position line of `true` is still wrong
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise DumpFormatError(
            f"field {name!r} must be {kind.__name__}, got {type(value).__name__}",
            where=f"{where}.{name}",
        )
    return value


def _object(value: Any, where: str) -> Mapping[str, Any]:
    if not isinstance(value, dict):
        raise DumpFormatError(
            f"expected an object, got {type(value).__name__}", where=where
        )
    return value


def _position(obj: Optional[Any], where: str) -> SourceLocation:
    if obj is None:
        return SourceLocation()
    obj = _object(obj, where)
    return SourceLocation(
        file=_field(obj, "file", str, where, ""),
        line=_field(obj, "line", int, where, 0),
        column=_field(obj, "column", int, where, 0),
        offset=_field(obj, "offset", int, where, -1),
    )


def _step(obj: Any, where: str) -> FlowStep:
    obj = _object(obj, where)
    return FlowStep(
        producer_position=_position(obj.get("producer_position"), f"{where}.producer_position"),
        producer_repr=_field(obj, "producer_repr", str, where, ""),
        consumer_position=_position(obj.get("consumer_position"), f"{where}.consumer_position"),
        consumer_repr=_field(obj, "consumer_repr", str, where, ""),
    )


def _steps(obj: Mapping[str, Any], name: str, where: str) -> Tuple[FlowStep, ...]:
    items = _field(obj, name, list, where, [])
    return tuple(_step(s, f"{where}.{name}[{i}]") for i, s in enumerate(items))


# ── decoders ─────────────────────────────────────────────────────────

def decode_file(obj: Any, where: str = "files[0]") -> SourceFile:
    obj = _object(obj, where)
    decls = []
    for i, d in enumerate(_field(obj, "declarations", list, where, [])):
        dw = f"{where}.declarations[{i}]"
        d = _object(d, dw)
        decls.append(Declaration(
            name=_field(d, "name", str, dw, required=True),
            kind=_field(d, "kind", str, dw, "func"),
            start=_field(d, "start", int, dw, required=True),
            end=_field(d, "end", int, dw, required=True),
        ))
    source = _field(obj, "source", str, where)
    return SourceFile(
        path=_field(obj, "path", str, where, required=True),
        declarations=tuple(decls),
        package=_field(obj, "package", str, where, ""),
        docstring=_field(obj, "docstring", str, where, ""),
        line_starts=line_starts_of(source) if source is not None else (),
    )


def decode_conflict(obj: Any, where: str = "conflicts[0]") -> Conflict:
    obj = _object(obj, where)
    flow = _object(_field(obj, "flow", dict, where, {}), f"{where}.flow")
    return Conflict(
        position=_position(obj.get("position"), f"{where}.position"),
        flow=NilFlow(
            nil_path=_steps(flow, "nil_path", f"{where}.flow"),
            nonnil_path=_steps(flow, "nonnil_path", f"{where}.flow"),
        ),
    )


def _with_offset(conflict: Conflict, program: StaticProgramView,
                 cwd: Optional[PathLike]) -> Conflict:
    pos = conflict.position
    if pos.offset >= 0 or not pos.is_valid():
        return conflict
    for source_file in program.files():
        if relative_filename(source_file.path, cwd) != pos.file:
            continue
        offset = source_file.offset_of(pos.line, pos.column)
        if offset is not None:
            conflict.position = SourceLocation(pos.file, pos.line, pos.column, offset)
            break
    return conflict


def decode_dump(doc: Any, cwd: Optional[PathLike] = None) -> Dump:
    """Decode an already-parsed JSON document."""
    doc = _object(doc, "$")
    program = StaticProgramView(
        decode_file(f, f"files[{i}]")
        for i, f in enumerate(_field(doc, "files", list, "$", []))
    )
    conflicts = [
        _with_offset(decode_conflict(c, f"conflicts[{i}]"), program, cwd)
        for i, c in enumerate(_field(doc, "conflicts", list, "$", []))
    ]
    logger.info("Loaded %d conflicts over %d files", len(conflicts), len(program))
    return Dump(program=program, conflicts=conflicts)


def load_dump(source: Union[str, Path], cwd: Optional[PathLike] = None) -> Dump:
    """Read and decode the dump file at *source*."""
    path = Path(source)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise DumpFormatError(
            f"cannot read dump: {exc}",
            code=ErrorCode.UNREADABLE_DUMP,
            where=str(path),
        ) from exc
    try:
        doc = json.loads(text)
    except json.JSONDecodeError as exc:
        raise DumpFormatError(
            f"invalid JSON: {exc.msg}",
            code=ErrorCode.INVALID_JSON,
            where=f"{path}:{exc.lineno}:{exc.colno}",
        ) from exc
    return decode_dump(doc, cwd)


__all__ = [
    "Dump",
    "decode_conflict",
    "decode_dump",
    "decode_file",
    "load_dump",
]
