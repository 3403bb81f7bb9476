"""
nilflow_report/grouping.py
══════════════════════════

Merge conflicts that share a nil source.

One left-to-right pass: the first conflict seen for a key becomes the
primary; every later conflict with that key is appended to the primary's
``similar_conflicts`` and left out of the result. Primaries keep their
input order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from nilflow_report.conflict import Conflict
from nilflow_report.keys import GroupingKey, Resolver, derive_key
from nilflow_report.scope import no_function

logger = logging.getLogger(__name__)


@dataclass
class ConflictGroup:
    """A primary conflict and the conflicts absorbed into it."""
    key: GroupingKey
    primary: Conflict
    index: int
    absorbed: List[Conflict] = field(default_factory=list)

    def absorb(self, conflict: Conflict) -> None:
        self.primary.add_similar_conflict(conflict)
        self.absorbed.append(conflict)

    @property
    def size(self) -> int:
        return 1 + len(self.absorbed)


def build_groups(
    conflicts: Sequence[Conflict],
    resolver: Resolver = no_function,
) -> List[ConflictGroup]:
    """Partition *conflicts* by grouping key, in order of first appearance."""
    groups: Dict[GroupingKey, ConflictGroup] = {}
    for i, conflict in enumerate(conflicts):
        key = derive_key(conflict, resolver)
        group = groups.get(key)
        if group is None:
            groups[key] = ConflictGroup(key=key, primary=conflict, index=i)
            continue
        logger.debug(
            "Merging conflict at %s into conflict at %s",
            conflict.position, group.primary.position,
        )
        group.absorb(conflict)
    # dicts preserve insertion order, i.e. the primaries' input order
    return list(groups.values())


def group_conflicts(
    conflicts: Sequence[Conflict],
    resolver: Resolver = no_function,
) -> List[Conflict]:
    """
    Group *conflicts* and return the primaries.

    The primaries' ``similar_conflicts`` lists are extended in place.
    """
    grouped = [g.primary for g in build_groups(conflicts, resolver)]
    logger.debug("Grouped %d conflicts into %d", len(conflicts), len(grouped))
    return grouped


__all__ = [
    "ConflictGroup",
    "build_groups",
    "group_conflicts",
]
