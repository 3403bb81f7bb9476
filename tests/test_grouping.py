# tests/test_grouping.py
"""
Tests for single-pass conflict aggregation.
"""

from nilflow_report.config import Config
from nilflow_report.grouping import build_groups, group_conflicts
from nilflow_report.scope import FunctionResolver
from tests.conftest import CWD, loc, make_conflict, single_assertion, step, traced


def _distinct(n):
    return [
        single_assertion(f"value {i}", "dereferenced", loc("a.go", i + 1, 1),
                         producer=loc("a.go", i + 1, 5))
        for i in range(n)
    ]


class TestDistinctConflicts:

    def test_unchanged_when_no_keys_repeat(self):
        conflicts = _distinct(4)
        grouped = group_conflicts(conflicts)
        assert grouped == conflicts
        assert all(c.similar_conflicts == [] for c in grouped)

    def test_empty_input(self):
        assert group_conflicts([]) == []


class TestMerging:

    def test_later_conflict_joins_first(self):
        nil_steps = [step("x", "assigned nil", consumer=loc("a.go", 2, 1))]
        c1 = traced(nil_steps, loc("a.go", 5, 1))
        c2 = traced(nil_steps, loc("b.go", 9, 3))

        grouped = group_conflicts([c1, c2])

        assert grouped == [c1]
        assert grouped[0] is c1
        assert [s.position for s in c1.similar_conflicts] == [c2.position]

    def test_order_of_primaries_preserved(self):
        shared = [step("x", "assigned nil", consumer=loc("a.go", 2, 1))]
        a, b, c = _distinct(3)
        d1 = traced(shared, loc("a.go", 20, 1))
        d2 = traced(shared, loc("a.go", 30, 1))

        grouped = group_conflicts([a, d1, b, d2, c])

        assert grouped == [a, d1, b, c]
        assert len(d1.similar_conflicts) == 1

    def test_output_is_flat(self):
        shared = [step("x", "assigned nil", consumer=loc("a.go", 2, 1))]
        conflicts = [traced(shared, loc("a.go", 10 + i, 1)) for i in range(5)]

        grouped = group_conflicts(conflicts)

        assert len(grouped) == 1
        assert len(grouped[0].similar_conflicts) == 4
        for primary in grouped:
            for similar in primary.similar_conflicts:
                assert similar.similar_conflicts == []

    def test_same_producer_location_merges(self):
        producer = loc("a.go", 2, 5)
        c1 = single_assertion("result of f()", "dereferenced", loc("a.go", 3, 1), producer=producer)
        c2 = single_assertion("result of f()", "field accessed", loc("a.go", 8, 1), producer=producer)
        assert group_conflicts([c1, c2]) == [c1]

    def test_producer_offset_ignored(self):
        c1 = single_assertion("result of f()", "dereferenced", loc("a.go", 3, 1),
                              producer=loc("a.go", 2, 5, offset=-1))
        c2 = single_assertion("result of f()", "dereferenced", loc("a.go", 8, 1),
                              producer=loc("a.go", 2, 5, offset=12))
        assert group_conflicts([c1, c2]) == [c1]
        assert len(c1.similar_conflicts) == 1

    def test_degenerate_flows_group_together(self):
        empty = make_conflict(position=loc("a.go", 1, 1))
        multi = make_conflict(nonnil_path=[step("a"), step("b")], position=loc("z.go", 9, 9))
        assert group_conflicts([empty, multi]) == [empty]


class TestFunctionDisambiguation:

    def _pair(self, offset1, offset2):
        repr_p, repr_c = "deep read from local `mp`", "dereferenced"
        return (
            single_assertion(repr_p, repr_c, loc("main.go", 3, 7, offset=offset1)),
            single_assertion(repr_p, repr_c, loc("main.go", 9, 7, offset=offset2)),
        )

    def test_different_functions_not_merged(self, program):
        c1, c2 = self._pair(50, 150)
        resolver = FunctionResolver(program, Config(), CWD)
        assert group_conflicts([c1, c2], resolver) == [c1, c2]

    def test_same_function_merged(self, program):
        c1, c2 = self._pair(50, 60)
        resolver = FunctionResolver(program, Config(), CWD)
        assert group_conflicts([c1, c2], resolver) == [c1]

    def test_no_enclosing_function_merged(self, program):
        c1, c2 = self._pair(5, 105)
        resolver = FunctionResolver(program, Config(), CWD)
        assert group_conflicts([c1, c2], resolver) == [c1]

    def test_default_resolver_merges(self):
        c1, c2 = self._pair(50, 150)
        assert group_conflicts([c1, c2]) == [c1]

    def test_traced_flows_ignore_function(self, program):
        shared = [step("x", "assigned nil", consumer=loc("main.go", 2, 1))]
        c1 = traced(shared, loc("main.go", 3, 1, offset=50))
        c2 = traced(shared, loc("main.go", 9, 1, offset=150))
        resolver = FunctionResolver(program, Config(), CWD)
        assert group_conflicts([c1, c2], resolver) == [c1]


class TestBuildGroups:

    def test_group_bookkeeping(self):
        shared = [step("x", "assigned nil", consumer=loc("a.go", 2, 1))]
        a = _distinct(1)[0]
        d1 = traced(shared, loc("a.go", 20, 1))
        d2 = traced(shared, loc("a.go", 30, 1))

        groups = build_groups([d1, a, d2])

        assert [g.index for g in groups] == [0, 1]
        assert groups[0].size == 2
        assert groups[0].absorbed == [d2]
        assert groups[1].size == 1
