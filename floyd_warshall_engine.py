"""
Floyd-Warshall RelaxationEngine implementations.

All engines run the same recurrence over dense matrices:

    for k in 0..n-1:            # every (i, j) for k finishes before k + 1
        for i, j:
            if D[i][k], D[k][j] finite and D[i][k] + D[k][j] < D[i][j]:
                D[i][j] = D[i][k] + D[k][j]
                N[i][j] = N[i][k]

They differ only in how the (i, j) sweep for a fixed k is evaluated.
Negative weights are accepted; negative cycles are not detected and leave the
affected pairs unspecified, but every engine stops after exactly n steps.

Relaxing already relaxed matrices a second time changes nothing when edge
sums are exact (integer weights, for example). With general float weights a
second pass can regroup a sum and land 1 ulp lower, so repeated relaxation is
only stable within floating-point tolerance; next hops stay the same.
"""

from concurrent.futures import Executor, ThreadPoolExecutor, wait
from typing import Callable, Dict, List, Optional
import math

import numpy as np

from algorithms import RelaxationEngine
from matrices import DistanceMatrix, NextHopMatrix


class SimpleFloydWarshallEngine(RelaxationEngine):
    """
    Reference triple loop over plain Python lists.

    Complexity:
        Theta(n^3) time, Theta(n^2) extra space for the working lists.
    """

    def __init__(self) -> None:
        # Instrumentation counters per invocation.
        self.last_candidates_examined = 0
        self.last_relaxed = 0

    def relax(self, distances: DistanceMatrix, next_hops: NextHopMatrix) -> None:
        self.last_candidates_examined = 0
        self.last_relaxed = 0

        n = distances.size
        if n == 0:
            return

        dist: List[List[float]] = distances.values.tolist()
        hops: List[List[int]] = next_hops.values.tolist()
        isfinite = math.isfinite

        for k in range(n):
            row_k = dist[k]
            for i in range(n):
                row_i = dist[i]
                d_ik = row_i[k]
                if not isfinite(d_ik):
                    continue
                hop_i = hops[i]
                hop_ik = hop_i[k]
                for j in range(n):
                    d_kj = row_k[j]
                    if not isfinite(d_kj):
                        continue
                    self.last_candidates_examined += 1
                    alt = d_ik + d_kj
                    if alt < row_i[j]:
                        row_i[j] = alt
                        hop_i[j] = hop_ik
                        self.last_relaxed += 1

        distances.values[:, :] = np.asarray(dist, dtype=distances.values.dtype)
        next_hops.values[:, :] = np.asarray(hops, dtype=next_hops.values.dtype)


class VectorisedFloydWarshallEngine(RelaxationEngine):
    """
    Evaluates the whole (i, j) sweep for one k as a single numpy operation.

    The candidate matrix for k is built from column k and row k as they stand
    when step k starts, which matches the sequential loop whenever D[k][k] is
    not negative.
    """

    def __init__(self) -> None:
        self.last_candidates_examined = 0
        self.last_relaxed = 0

    def relax(self, distances: DistanceMatrix, next_hops: NextHopMatrix) -> None:
        self.last_candidates_examined = 0
        self.last_relaxed = 0

        dist = distances.values
        hops = next_hops.values
        for k in range(distances.size):
            examined, relaxed = _relax_rows(dist, hops, k, slice(None))
            self.last_candidates_examined += examined
            self.last_relaxed += relaxed


class ParallelFloydWarshallEngine(RelaxationEngine):
    """
    Splits the (i, j) sweep for each k into row blocks run on an executor.

    All blocks for k are awaited before k + 1 is submitted. Blocks write
    disjoint rows, and read column k and a snapshot of row k, so they never
    observe each other's writes within a step.
    """

    def __init__(
        self,
        max_workers: int = 4,
        executor: Optional[Executor] = None,
        block_rows: Optional[int] = None,
    ) -> None:
        if max_workers <= 0:
            raise ValueError("max_workers must be positive")
        if block_rows is not None and block_rows <= 0:
            raise ValueError("block_rows must be positive")
        self.max_workers = max_workers
        self.executor = executor
        self.block_rows = block_rows
        self.last_candidates_examined = 0
        self.last_relaxed = 0

    def relax(self, distances: DistanceMatrix, next_hops: NextHopMatrix) -> None:
        self.last_candidates_examined = 0
        self.last_relaxed = 0
        if distances.size == 0:
            return

        if self.executor is None:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                self._relax_with_executor(distances, next_hops, pool)
        else:
            self._relax_with_executor(distances, next_hops, self.executor)

    def _relax_with_executor(
        self, distances: DistanceMatrix, next_hops: NextHopMatrix, executor: Executor
    ) -> None:
        n = distances.size
        block = self.block_rows or max(1, math.ceil(n / self.max_workers))
        blocks = [slice(start, min(start + block, n)) for start in range(0, n, block)]

        dist = distances.values
        hops = next_hops.values
        for k in range(n):
            row_k = dist[k, :].copy()
            futures = [executor.submit(_relax_rows, dist, hops, k, rows, row_k) for rows in blocks]
            wait(futures)
            for future in futures:
                examined, relaxed = future.result()
                self.last_candidates_examined += examined
                self.last_relaxed += relaxed


def _relax_rows(
    dist: np.ndarray,
    hops: np.ndarray,
    k: int,
    rows: slice,
    row_k: Optional[np.ndarray] = None,
) -> tuple[int, int]:
    """
    Relax D[rows, :] through intermediate k in place.

    Returns (candidates examined, entries improved).
    """
    if row_k is None:
        row_k = dist[k, :].copy()
    col_k = dist[rows, k].copy()
    hop_col_k = hops[rows, k].copy()

    # Sentinel guard: a candidate only exists when both operands are finite.
    finite = np.isfinite(col_k)[:, None] & np.isfinite(row_k)[None, :]
    candidate = np.where(finite, col_k[:, None] + row_k[None, :], np.inf)

    block = dist[rows, :]
    better = finite & (candidate < block)
    relaxed = int(np.count_nonzero(better))
    if relaxed:
        block[better] = candidate[better]
        hop_block = hops[rows, :]
        hop_block[better] = np.broadcast_to(hop_col_k[:, None], better.shape)[better]
    return int(np.count_nonzero(finite)), relaxed


ENGINES: Dict[str, Callable[..., RelaxationEngine]] = {
    "loop": SimpleFloydWarshallEngine,
    "vectorised": VectorisedFloydWarshallEngine,
    "parallel": ParallelFloydWarshallEngine,
}


def make_engine(name: str, **kwargs) -> RelaxationEngine:
    """Instantiate a registered engine by name."""
    try:
        factory = ENGINES[name]
    except KeyError:
        raise ValueError(f"Unknown relaxation engine '{name}'. Known: {', '.join(sorted(ENGINES))}") from None
    return factory(**kwargs)
