"""
Algorithm interfaces for all-pairs shortest paths.

Keeps the relaxation and reconstruction algorithms separate from ingestion,
the query facade and reporting.
"""

from abc import ABC, abstractmethod

from matrices import DistanceMatrix, NextHopMatrix
from paths import PathResult


class RelaxationEngine(ABC):
    """
    Interface for the dense all-pairs relaxation.
    """

    @abstractmethod
    def relax(self, distances: DistanceMatrix, next_hops: NextHopMatrix) -> None:
        """
        Relax both matrices in place until every pair is optimal.

        For each intermediate k (ascending), the complete (i, j) sweep for k
        must finish before k + 1 starts. A candidate D[i][k] + D[k][j] is only
        formed when both operands are finite, and replaces D[i][j] only when
        strictly smaller, in which case next_hops[i][j] becomes
        next_hops[i][k].
        """
        raise NotImplementedError


class PathReconstructor(ABC):
    """
    Interface for walking a finalized next-hop matrix.
    """

    @abstractmethod
    def reconstruct(
        self,
        distances: DistanceMatrix,
        next_hops: NextHopMatrix,
        source: int,
        destination: int,
    ) -> PathResult:
        """
        Return the vertex sequence from source to destination.

        Must not mutate either matrix. Inconsistencies are reported through
        the result status, never by looping or truncating silently.
        """
        raise NotImplementedError
