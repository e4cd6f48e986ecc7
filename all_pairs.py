"""
All-pairs shortest path solver over labelled vertices.

Wires ingestion, matrix initialisation, relaxation and reconstruction
together behind a label-based query API:

    apsp = AllPairsShortestPaths.from_triples([("A", "B", 1.0), ("B", "C", 2.0)])
    apsp.generate_distance_matrix()
    apsp.distance("A", "C")    # 3.0
    apsp.path("A", "C")        # LabelledPath(FOUND, ("A", "B", "C"))

Edges are read once at construction and the matrices are relaxed once; after
that every query is read-only.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Hashable, Iterable, Iterator, Optional, Tuple
import logging
import math
import time

import pandas as pd

from algorithms import PathReconstructor, RelaxationEngine
from edges import EdgeListSource, EdgeSource
from floyd_warshall_engine import VectorisedFloydWarshallEngine
from matrices import INFINITY, DistanceMatrix, NextHopMatrix, initialise_matrices
from path_reconstruction import SimplePathReconstructor
from paths import LabelledPath, PathResult
from vertex_index import VertexIndex

logger = logging.getLogger(__name__)


class MatrixNotReadyError(RuntimeError):
    """Raised when distances or paths are queried before relaxation ran."""


@dataclass(frozen=True)
class PairResult:
    """
    One ordered pair in the solver output.

    distance is INFINITY and reachable is False for unreachable pairs. path
    is only populated when requested.
    """
    source: Hashable
    destination: Hashable
    distance: float
    reachable: bool
    path: Optional[LabelledPath] = None


class AllPairsShortestPaths:
    """
    Dense all-pairs shortest paths with next-hop route reconstruction.
    """

    def __init__(
        self,
        source: EdgeSource,
        engine: Optional[RelaxationEngine] = None,
        reconstructor: Optional[PathReconstructor] = None,
    ) -> None:
        self.engine = engine or VectorisedFloydWarshallEngine()
        self.reconstructor = reconstructor or SimplePathReconstructor()

        self.index = VertexIndex(source.vertices())
        edges = list(source.edges())
        for edge in edges:
            self.index.intern(edge.source)
            self.index.intern(edge.destination)

        self._edge_weights: Dict[Tuple[int, int], float] = {}
        for edge in edges:
            self._edge_weights[(self.index.id_of(edge.source), self.index.id_of(edge.destination))] = edge.weight

        self._distances, self._next_hops = initialise_matrices(self.index, edges)
        self._generated = False
        self.relaxation_seconds: Optional[float] = None
        logger.debug("ingested %d edges over %d vertices", len(edges), self.index.size())

    @classmethod
    def from_triples(
        cls,
        triples: Iterable[Tuple[Hashable, Hashable, float]],
        vertices: Iterable[Hashable] = (),
        **kwargs,
    ) -> "AllPairsShortestPaths":
        return cls(EdgeListSource(triples, vertices=vertices), **kwargs)

    # --- Lifecycle -----------------------------------------------------------

    @property
    def generated(self) -> bool:
        return self._generated

    def generate_distance_matrix(self) -> None:
        """
        Relax the matrices to all-pairs optimality.

        Runs once; later calls leave the matrices untouched.
        """
        if self._generated:
            logger.debug("distance matrix already generated; skipping relaxation")
            return
        start = time.perf_counter()
        self.engine.relax(self._distances, self._next_hops)
        self.relaxation_seconds = time.perf_counter() - start
        self._generated = True
        logger.debug(
            "relaxed %d vertices with %s in %.4fs",
            self.index.size(),
            type(self.engine).__name__,
            self.relaxation_seconds,
        )

    # --- Queries -------------------------------------------------------------

    @property
    def distances(self) -> DistanceMatrix:
        """Distance matrix; initial distances until generated."""
        return self._distances

    @property
    def next_hops(self) -> NextHopMatrix:
        return self._next_hops

    def vertices(self) -> list:
        return self.index.labels()

    def edge_weight(self, src: Hashable, dst: Hashable) -> float:
        """Weight of the direct edge src -> dst as ingested, INFINITY if none."""
        key = (self.index.id_of(src), self.index.id_of(dst))
        return self._edge_weights.get(key, INFINITY)

    def distance(self, src: Hashable, dst: Hashable) -> float:
        self._require_generated()
        return self._distances[self.index.id_of(src), self.index.id_of(dst)]

    def path(self, src: Hashable, dst: Hashable) -> LabelledPath:
        self._require_generated()
        result = self.reconstructor.reconstruct(
            self._distances, self._next_hops, self.index.id_of(src), self.index.id_of(dst)
        )
        return self._label(result)

    def pairs(self, include_paths: bool = False) -> Iterator[PairResult]:
        """
        Every ordered pair (source != destination) in id order.
        """
        self._require_generated()
        n = self.index.size()
        for i in range(n):
            for j in range(n):
                if i == j:
                    continue
                dist = self._distances[i, j]
                reachable = math.isfinite(dist)
                path = None
                if include_paths:
                    path = self._label(self.reconstructor.reconstruct(self._distances, self._next_hops, i, j))
                yield PairResult(
                    source=self.index.label_of(i),
                    destination=self.index.label_of(j),
                    distance=dist,
                    reachable=reachable,
                    path=path,
                )

    def to_frame(self, include_paths: bool = False) -> pd.DataFrame:
        """
        Pair results as a DataFrame with columns source, destination,
        distance, reachable (and path, path_status when include_paths).
        """
        rows = []
        for pair in self.pairs(include_paths=include_paths):
            row = {
                "source": pair.source,
                "destination": pair.destination,
                "distance": pair.distance,
                "reachable": pair.reachable,
            }
            if include_paths and pair.path is not None:
                row["path"] = list(pair.path.vertices)
                row["path_status"] = pair.path.status.value
            rows.append(row)
        columns = ["source", "destination", "distance", "reachable"]
        if include_paths:
            columns += ["path", "path_status"]
        return pd.DataFrame(rows, columns=columns)

    def _label(self, result: PathResult) -> LabelledPath:
        return LabelledPath(result.status, tuple(self.index.label_of(v) for v in result.vertices))

    def _require_generated(self) -> None:
        if not self._generated:
            raise MatrixNotReadyError("generate_distance_matrix() must run before querying")
