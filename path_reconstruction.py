"""
Next-hop walk PathReconstructor.
"""

from typing import List, Set

from algorithms import PathReconstructor
from matrices import DistanceMatrix, NextHopMatrix
from paths import PathResult, PathStatus


class SimplePathReconstructor(PathReconstructor):
    """
    Follows next_hops[current][destination] from source until destination.

    With consistent matrices the walk visits each vertex at most once, so it
    finishes within n steps. A revisit or an undefined hop is reported as a
    failure status with the partial walk attached. Never mutates its inputs,
    so concurrent read-only queries on finalized matrices are safe.
    """

    def reconstruct(
        self,
        distances: DistanceMatrix,
        next_hops: NextHopMatrix,
        source: int,
        destination: int,
    ) -> PathResult:
        if not distances.is_finite(source, destination):
            return PathResult(PathStatus.NO_PATH)

        n = next_hops.size
        walk: List[int] = [source]
        seen: Set[int] = {source}
        current = source
        while current != destination:
            current = next_hops[current, destination]
            if not 0 <= current < n:
                return PathResult(PathStatus.BROKEN_CHAIN, tuple(walk))
            if current in seen:
                return PathResult(PathStatus.CYCLE_DETECTED, tuple(walk))
            walk.append(current)
            seen.add(current)

        return PathResult(PathStatus.FOUND, tuple(walk))
