"""
Dense distance and next-hop matrices indexed by interned vertex ids.

Both matrices are n x n numpy arrays. The distance matrix holds the best known
distance for every ordered pair (INFINITY when no path is known); the next-hop
matrix holds the vertex following i on that path (NO_HOP when undefined).
Relaxation must update the two in lock-step.
"""

from typing import Dict, Iterable, Tuple
import logging
import math

import numpy as np

from edges import Edge
from vertex_index import VertexIndex

logger = logging.getLogger(__name__)

INFINITY = math.inf
NO_HOP = -1


class _SquareMatrix:
    dtype: type = np.float64
    fill: object = 0

    def __init__(self, size: int) -> None:
        if size < 0:
            raise ValueError(f"matrix size must be non-negative, got {size}")
        self._values = np.full((size, size), self.fill, dtype=self.dtype)

    @property
    def size(self) -> int:
        return self._values.shape[0]

    @property
    def values(self) -> np.ndarray:
        """Underlying array; engines mutate it in place."""
        return self._values

    def copy(self):
        clone = type(self)(0)
        clone._values = self._values.copy()
        return clone

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, type(self)):
            return NotImplemented
        return np.array_equal(self._values, other._values)

    __hash__ = None  # type: ignore[assignment]


class DistanceMatrix(_SquareMatrix):
    """n x n float distances; INFINITY means no known path."""

    dtype = np.float64
    fill = INFINITY

    def __getitem__(self, pair: Tuple[int, int]) -> float:
        return float(self._values[pair])

    def __setitem__(self, pair: Tuple[int, int], value: float) -> None:
        self._values[pair] = value

    def is_finite(self, i: int, j: int) -> bool:
        return math.isfinite(self._values[i, j])


class NextHopMatrix(_SquareMatrix):
    """n x n vertex ids; NO_HOP means undefined."""

    dtype = np.int64
    fill = NO_HOP

    def __getitem__(self, pair: Tuple[int, int]) -> int:
        return int(self._values[pair])

    def __setitem__(self, pair: Tuple[int, int], value: int) -> None:
        self._values[pair] = value


def initialise_matrices(
    index: VertexIndex, edges: Iterable[Edge]
) -> Tuple[DistanceMatrix, NextHopMatrix]:
    """
    Build the initial matrices from direct edges.

    Every label in edges must already be interned in index. The diagonal is 0
    with next hop i. A later edge for the same ordered pair overwrites an
    earlier one, regardless of which is cheaper. Self-loop edges never replace
    the zero diagonal.
    """
    n = index.size()
    dist = DistanceMatrix(n)
    nxt = NextHopMatrix(n)

    last_weight: Dict[Tuple[int, int], float] = {}
    for edge in edges:
        i = index.id_of(edge.source)
        j = index.id_of(edge.destination)
        if i == j:
            continue
        last_weight[(i, j)] = edge.weight

    for (i, j), weight in last_weight.items():
        dist[i, j] = weight
        nxt[i, j] = j

    diag = np.arange(n)
    dist.values[diag, diag] = 0.0
    nxt.values[diag, diag] = diag

    logger.debug("initialised %dx%d matrices from %d distinct edges", n, n, len(last_weight))
    return dist, nxt
