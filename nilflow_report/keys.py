"""
nilflow_report/keys.py
══════════════════════

Grouping keys: which conflicts share a nil source.

Key kinds
─────────

  StructuralKey   the serialized nil path. Used for every conflict that is
                  not a single assertion; conflicts with the same nil path
                  but different dereference sites share it.

  ProducerKey     single-assertion conflict whose producer has a location:
                  the producer location and representation.

  HeuristicKey    single-assertion conflict without a producer location:
                  producer and consumer representations, qualified by the
                  enclosing function name when one can be found.

A single-assertion conflict has an empty nil path and exactly one non-nil
step. A conflict with an empty nil path and zero or several non-nil steps
gets ``StructuralKey("")`` and groups with every other such conflict.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Union

from nilflow_report.conflict import Conflict
from nilflow_report.flow import NilFlow, path_string

logger = logging.getLogger(__name__)

# Conflict -> enclosing function name, see nilflow_report.scope.
Resolver = Callable[[Conflict], Optional[str]]


@dataclass(frozen=True)
class StructuralKey:
    path: str

    def __str__(self) -> str:
        return self.path


@dataclass(frozen=True)
class ProducerKey:
    # file:line:col only; byte offsets do not take part in identity
    location: str
    producer_repr: str

    def __str__(self) -> str:
        return f"{self.location}: {self.producer_repr}"


@dataclass(frozen=True)
class HeuristicKey:
    producer_repr: str
    consumer_repr: str
    function: Optional[str] = None

    def __str__(self) -> str:
        key = f"{self.producer_repr};{self.consumer_repr}"
        if self.function is not None:
            key = f"{self.function}:{key}"
        return key


GroupingKey = Union[StructuralKey, ProducerKey, HeuristicKey]


def is_single_assertion(flow: NilFlow) -> bool:
    """True for a direct, untraced flow: no nil path, one non-nil step."""
    return not flow.nil_path and len(flow.nonnil_path) == 1


def derive_key(conflict: Conflict, resolver: Resolver) -> GroupingKey:
    """
    Compute the grouping key of *conflict*.

    *resolver* is only consulted for single-assertion conflicts whose
    producer has no valid location.
    """
    flow = conflict.flow
    if not is_single_assertion(flow):
        return StructuralKey(path_string(flow.nil_path))

    step = flow.nonnil_path[0]
    if step.producer_position.is_valid():
        return ProducerKey(str(step.producer_position), step.producer_repr)

    function = resolver(conflict)
    if function is None:
        logger.debug(
            "No enclosing function for %s; grouping by representation only",
            conflict.position,
        )
    return HeuristicKey(step.producer_repr, step.consumer_repr, function)


__all__ = [
    "GroupingKey",
    "HeuristicKey",
    "ProducerKey",
    "Resolver",
    "StructuralKey",
    "derive_key",
    "is_single_assertion",
]
