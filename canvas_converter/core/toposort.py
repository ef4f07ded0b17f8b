"""Kahn's-algorithm topological ordering with cycle detection.

WHY: Arrows on the canvas say "this card comes before that one". The page
needs one linear order consistent with every arrow, and a canvas whose
arrows loop back on themselves has no such order at all.

HOW: Seed a FIFO queue with every zero in-degree id in input order, then
repeatedly pop an id, emit it, and decrement the in-degree of each of its
successors, enqueuing a successor the moment it reaches zero. If ids are
left over when the queue drains, they sit on (or behind) a cycle.

RULES:
- The caller's adjacency and in-degree maps are never mutated
- Root tie-break: input order of node_ids
- Successor tie-break: order of the adjacency list
- Successors outside node_ids are ignored
- Cycle → CycleDetectedError carrying the unordered remainder
"""

from __future__ import annotations

from collections import deque
from typing import Dict, Iterable, List, Mapping, Sequence


class CycleDetectedError(ValueError):
    """The directed graph contains at least one cycle.

    Attributes:
        remaining: ids that could not be ordered, in input order. These
            are the cycle members plus anything downstream of them.
    """

    def __init__(self, remaining: Iterable[str]):
        self.remaining = list(remaining)
        super().__init__(
            "Cycle detected among nodes: {}".format(", ".join(self.remaining))
        )


def topological_sort(
    node_ids: Sequence[str],
    adjacency: Mapping[str, Sequence[str]],
    in_degree: Mapping[str, int],
) -> List[str]:
    """Order node_ids so that every directed edge u → v puts u before v.

    Args:
        node_ids: The ids to order, in input order (fixes the root tie-break).
        adjacency: id → successor ids, in the order the edges were added.
        in_degree: id → number of incoming directed edges. Missing ids
            count as zero.

    Returns:
        A permutation of node_ids in topological order.

    Raises:
        CycleDetectedError: If not every id could be ordered.
    """
    node_ids = list(dict.fromkeys(node_ids))
    members = set(node_ids)
    remaining_in = {node_id: in_degree.get(node_id, 0) for node_id in node_ids}  # type: Dict[str, int]

    queue = deque(node_id for node_id in node_ids if remaining_in[node_id] == 0)
    ordered = []  # type: List[str]

    while queue:
        current = queue.popleft()
        ordered.append(current)
        for successor in adjacency.get(current, ()):
            if successor not in members:
                continue
            remaining_in[successor] -= 1
            if remaining_in[successor] == 0:
                queue.append(successor)

    if len(ordered) < len(remaining_in):
        done = set(ordered)
        raise CycleDetectedError(
            node_id for node_id in remaining_in if node_id not in done
        )

    return ordered
