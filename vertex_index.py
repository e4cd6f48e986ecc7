"""
Vertex interning for the all-pairs solver.

Maps arbitrary hashable vertex labels to dense integer ids in [0, n), in the
order labels are first seen. Ids never change once assigned.
"""

from typing import Dict, Hashable, Iterable, List


class UnknownVertexError(KeyError):
    """Raised when a label that was never interned is looked up."""


class VertexIndex:
    """
    Label <-> id bijection owned by the ingestion step.
    """

    def __init__(self, labels: Iterable[Hashable] = ()) -> None:
        self._ids: Dict[Hashable, int] = {}
        self._labels: List[Hashable] = []
        for label in labels:
            self.intern(label)

    def intern(self, label: Hashable) -> int:
        """Return the id for label, assigning the next free id if it is new."""
        vid = self._ids.get(label)
        if vid is None:
            vid = len(self._labels)
            self._ids[label] = vid
            self._labels.append(label)
        return vid

    def size(self) -> int:
        return len(self._labels)

    def id_of(self, label: Hashable) -> int:
        try:
            return self._ids[label]
        except KeyError:
            raise UnknownVertexError(label) from None

    def label_of(self, vid: int) -> Hashable:
        return self._labels[vid]

    def labels(self) -> List[Hashable]:
        """Labels in id order."""
        return list(self._labels)

    def __len__(self) -> int:
        return len(self._labels)

    def __contains__(self, label: object) -> bool:
        return label in self._ids
