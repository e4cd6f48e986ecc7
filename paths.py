"""
Path result types.

Reconstruction reports its outcome as a value: a found path, no path, or one
of two inconsistency outcomes. Callers branch on status instead of catching
exceptions.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Hashable, Sequence, Tuple


class PathStatus(Enum):
    FOUND = "found"
    NO_PATH = "no_path"
    # The walk revisited a vertex: distances and next hops disagree.
    CYCLE_DETECTED = "cycle_detected"
    # The walk hit an undefined next hop while the distance is finite.
    BROKEN_CHAIN = "broken_chain"


@dataclass(frozen=True)
class PathResult:
    """
    Outcome of one reconstruction over vertex ids.

    For FOUND, vertices runs from source to destination inclusive. For the
    inconsistency outcomes it holds the walk up to the point of failure; for
    NO_PATH it is empty.
    """
    status: PathStatus
    vertices: Tuple[int, ...] = ()

    @property
    def ok(self) -> bool:
        return self.status is PathStatus.FOUND

    def __bool__(self) -> bool:
        return self.ok

    def __len__(self) -> int:
        return len(self.vertices)


@dataclass(frozen=True)
class LabelledPath:
    """PathResult translated back to vertex labels."""
    status: PathStatus
    vertices: Tuple[Hashable, ...] = ()

    @property
    def ok(self) -> bool:
        return self.status is PathStatus.FOUND

    def __bool__(self) -> bool:
        return self.ok

    def __len__(self) -> int:
        return len(self.vertices)


def path_weight(vertices: Sequence[Hashable], edge_weight: Callable[[Hashable, Hashable], float]) -> float:
    """Sum edge_weight over consecutive vertex pairs; 0.0 for a single vertex."""
    return float(sum(edge_weight(u, v) for u, v in zip(vertices, vertices[1:])))
