# tests/test_scope.py
"""
Tests for enclosing-function lookup.
"""

from pathlib import PurePath

import pytest

from nilflow_report.config import Config
from nilflow_report.program import Declaration, SourceFile, StaticProgramView
from nilflow_report.scope import (
    FunctionResolver,
    find_enclosing_function_name,
    relative_filename,
)
from tests.conftest import CWD, MAIN_GO, loc, single_assertion


class TestRelativeFilename:

    def test_inside_cwd(self):
        assert relative_filename(f"{CWD}/pkg/a.go", CWD) == "pkg/a.go"

    def test_outside_cwd_keeps_path(self):
        assert relative_filename("/elsewhere/a.go", CWD) == "/elsewhere/a.go"

    def test_no_cwd(self):
        assert relative_filename("a.go", None) == "a.go"

    def test_path_object(self):
        assert relative_filename(f"{CWD}/a.go", PurePath(CWD)) == "a.go"


class TestFindEnclosingFunctionName:

    @pytest.mark.parametrize("offset,expected", [
        (10, "f1"),
        (55, "f1"),
        (100, "f1"),
        (150, "f2"),
        (200, "f2"),
        (105, None),
        (5, None),      # inside a var block, not a function
        (500, None),
        (-1, None),
    ])
    def test_offsets(self, offset, expected):
        pos = loc("main.go", 1, 1, offset=offset)
        assert find_enclosing_function_name(pos, [MAIN_GO], CWD) == expected

    def test_filename_must_match(self):
        pos = loc("other.go", 1, 1, offset=50)
        assert find_enclosing_function_name(pos, [MAIN_GO], CWD) is None

    def test_file_outside_cwd_never_matches_relative_name(self):
        outside = SourceFile(
            path="/elsewhere/main.go",
            declarations=[Declaration("g", start=0, end=100)],
        )
        pos = loc("main.go", 1, 1, offset=50)
        assert find_enclosing_function_name(pos, [outside], CWD) is None

    def test_first_match_wins(self):
        overlapping = SourceFile(
            path=f"{CWD}/main.go",
            declarations=[
                Declaration("outer", start=0, end=100),
                Declaration("inner", start=20, end=40),
            ],
        )
        pos = loc("main.go", 1, 1, offset=30)
        assert find_enclosing_function_name(pos, [overlapping], CWD) == "outer"

    def test_no_files(self):
        assert find_enclosing_function_name(loc(offset=5), [], CWD) is None


class TestFunctionResolver:

    def test_resolves_conflict(self, program):
        resolver = FunctionResolver(program, Config(), CWD)
        c = single_assertion("p", "c", loc("main.go", 4, 2, offset=150))
        assert resolver(c) == "f2"

    def test_out_of_scope_file_is_skipped(self):
        generated = SourceFile(
            path=MAIN_GO.path,
            declarations=MAIN_GO.declarations,
            docstring="// Code generated by mockgen. DO NOT EDIT.",
        )
        resolver = FunctionResolver(StaticProgramView([generated]), Config(), CWD)
        c = single_assertion("p", "c", loc("main.go", 4, 2, offset=150))
        assert resolver(c) is None

    def test_excluded_package_is_skipped(self, program):
        config = Config(exclude_pkgs=("example.com/app",))
        resolver = FunctionResolver(program, config, CWD)
        c = single_assertion("p", "c", loc("main.go", 4, 2, offset=150))
        assert resolver(c) is None
