# tests/conftest.py
"""
Shared builders for nilflow_report tests.
"""

import json

import pytest

from nilflow_report.conflict import Conflict
from nilflow_report.flow import FlowStep, NilFlow, SourceLocation
from nilflow_report.program import Declaration, SourceFile, StaticProgramView

CWD = "/src/app"


def loc(file="a.go", line=1, column=1, offset=-1):
    return SourceLocation(file=file, line=line, column=column, offset=offset)


def step(producer_repr="", consumer_repr="", producer=None, consumer=None):
    return FlowStep(
        producer_position=producer or SourceLocation(),
        producer_repr=producer_repr,
        consumer_position=consumer or SourceLocation(),
        consumer_repr=consumer_repr,
    )


def make_conflict(nil_path=(), nonnil_path=(), position=None):
    return Conflict(
        position=position or loc(),
        flow=NilFlow(nil_path=tuple(nil_path), nonnil_path=tuple(nonnil_path)),
    )


def single_assertion(producer_repr, consumer_repr, position, producer=None, consumer=None):
    """Conflict with an empty nil path and one non-nil step."""
    return make_conflict(
        nonnil_path=[step(producer_repr, consumer_repr, producer=producer,
                          consumer=consumer or position)],
        position=position,
    )


def traced(nil_steps, consumer, position=None):
    """Conflict with a nil path and a single dereference at *consumer*."""
    return make_conflict(
        nil_path=nil_steps,
        nonnil_path=[step("", "dereferenced", consumer=consumer)],
        position=position or consumer,
    )


# main.go layout used by scope tests:
#   f1: bytes 10..100, f2: bytes 110..200, var block: 0..9
MAIN_GO = SourceFile(
    path=f"{CWD}/main.go",
    declarations=(
        Declaration("globals", kind="var", start=0, end=9),
        Declaration("f1", kind="func", start=10, end=100),
        Declaration("f2", kind="func", start=110, end=200),
    ),
    package="example.com/app",
)


@pytest.fixture
def program():
    return StaticProgramView([MAIN_GO])


@pytest.fixture
def write_dump(tmp_path):
    def _write(doc, name="conflicts.json"):
        path = tmp_path / name
        path.write_text(json.dumps(doc), encoding="utf-8")
        return path
    return _write
