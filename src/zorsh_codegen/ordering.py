"""Declaration ordering for exported record schemas."""

from __future__ import annotations

import heapq
from typing import Iterable, Mapping

from zorsh_codegen.exceptions import CyclicDefinitionError


def order_declarations(
    records: Iterable[str], dependencies: Mapping[str, Iterable[str]]
) -> list[str]:
    """Sort record names so every producer precedes its consumers.

    Uses Kahn's algorithm; among records that are ready at the same time the
    lexicographically smallest comes first, so the order is deterministic.

    Args:
        records: Names of the records to declare.
        dependencies: Producer name -> names of the records that reference it.
            Edges touching names outside ``records`` are ignored.

    Returns:
        The record names in declaration order.

    Raises:
        CyclicDefinitionError: If the remaining edges form a cycle.
    """
    nodes = set(records)
    consumers: dict[str, set[str]] = {name: set() for name in nodes}
    in_degree: dict[str, int] = {name: 0 for name in nodes}

    for producer, targets in dependencies.items():
        if producer not in nodes:
            continue
        for consumer in targets:
            if consumer not in nodes or consumer == producer:
                continue
            if consumer not in consumers[producer]:
                consumers[producer].add(consumer)
                in_degree[consumer] += 1

    ready = [name for name, degree in in_degree.items() if degree == 0]
    heapq.heapify(ready)
    ordered: list[str] = []

    while ready:
        name = heapq.heappop(ready)
        ordered.append(name)
        for consumer in consumers[name]:
            in_degree[consumer] -= 1
            if in_degree[consumer] == 0:
                heapq.heappush(ready, consumer)

    if len(ordered) != len(nodes):
        remaining = sorted(name for name in nodes if in_degree[name] > 0)
        raise CyclicDefinitionError(remaining)

    return ordered
