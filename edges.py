"""
Edge sources for the all-pairs solver.

An edge source supplies an ordered sequence of directed, weighted edges over
vertex labels, plus optionally a set of labels to declare up front (so that
vertices without incident edges still get an id).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Hashable, Iterable, List, Sequence, Tuple
import math


class EdgeFormatError(ValueError):
    """Malformed edge input: bad weight, missing field, unreadable file."""


@dataclass(frozen=True)
class Edge:
    """Directed edge source -> destination with a real weight."""
    source: Hashable
    destination: Hashable
    weight: float


class EdgeSource(ABC):
    """Supplies edges in input order."""

    @abstractmethod
    def edges(self) -> Iterable[Edge]:
        """
        Edges in input order.

        Duplicate (source, destination) pairs are allowed; consumers keep the
        last one.
        """
        raise NotImplementedError

    def vertices(self) -> Iterable[Hashable]:
        """Labels to intern before any edge label. Empty by default."""
        return ()


class EdgeListSource(EdgeSource):
    """
    In-memory edge source built from (source, destination, weight) triples.
    """

    def __init__(
        self,
        triples: Iterable[Tuple[Hashable, Hashable, float]],
        vertices: Iterable[Hashable] = (),
    ) -> None:
        self._edges: List[Edge] = []
        for pos, triple in enumerate(triples):
            try:
                src, dst, weight = triple
            except (TypeError, ValueError):
                raise EdgeFormatError(f"edge #{pos}: expected (source, destination, weight), got {triple!r}") from None
            self._edges.append(Edge(src, dst, parse_weight(weight, f"edge #{pos}")))
        self._vertices: List[Hashable] = list(vertices)

    def edges(self) -> Sequence[Edge]:
        return list(self._edges)  # defensive copy

    def vertices(self) -> Sequence[Hashable]:
        return list(self._vertices)

    def __len__(self) -> int:
        return len(self._edges)


def parse_weight(value: object, where: str) -> float:
    """Coerce value to a finite float or raise EdgeFormatError mentioning where."""
    if isinstance(value, bool):
        raise EdgeFormatError(f"{where}: weight must be a real number, got {value!r}")
    try:
        weight = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise EdgeFormatError(f"{where}: weight must be a real number, got {value!r}") from None
    if not math.isfinite(weight):
        raise EdgeFormatError(f"{where}: weight must be finite, got {value!r}")
    return weight
