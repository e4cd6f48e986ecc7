"""
File readers that produce EdgeSource instances.

Two formats are supported:

* The plain edge-list text format: the first token is the number of edges
  ``m``, followed by ``m`` whitespace-separated triples
  ``source destination weight``. Vertex labels are non-negative integers and
  every id in ``0..max_label`` is declared, so ids that never appear in an
  edge become isolated vertices.
* CSV with a header containing ``source``, ``destination`` and ``weight``.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Tuple
import logging

import pandas as pd

from edges import EdgeFormatError, EdgeListSource, parse_weight

logger = logging.getLogger(__name__)

CSV_COLUMNS = ("source", "destination", "weight")


def read_edge_file(path: Path | str) -> EdgeListSource:
    """
    Read the count-prefixed integer edge-list format.

    Raises:
        EdgeFormatError: missing count, short file, non-integer or negative
            labels, non-numeric weights.
    """
    path = Path(path)
    try:
        tokens = path.read_text().split()
    except OSError as exc:
        raise EdgeFormatError(f"{path}: cannot read edge file ({exc})") from exc

    if not tokens:
        raise EdgeFormatError(f"{path}: empty file, expected an edge count")
    try:
        count = int(tokens[0])
    except ValueError:
        raise EdgeFormatError(f"{path}: edge count must be an integer, got {tokens[0]!r}") from None
    if count < 0:
        raise EdgeFormatError(f"{path}: edge count must be non-negative, got {count}")
    if len(tokens) < 1 + 3 * count:
        raise EdgeFormatError(
            f"{path}: expected {count} edges but found {(len(tokens) - 1) // 3} complete triples"
        )

    triples: List[Tuple[int, int, float]] = []
    max_label = -1
    for pos in range(count):
        lhs, rhs, w = tokens[1 + 3 * pos : 4 + 3 * pos]
        where = f"{path}: edge #{pos}"
        src = _parse_label(lhs, where)
        dst = _parse_label(rhs, where)
        triples.append((src, dst, parse_weight(w, where)))
        max_label = max(max_label, src, dst)

    logger.debug("read %d edges over %d vertex ids from %s", count, max_label + 1, path)
    return EdgeListSource(triples, vertices=range(max_label + 1))


def read_edge_csv(path: Path | str) -> EdgeListSource:
    """
    Read a CSV edge list through pandas.

    Extra columns are ignored. Labels keep whatever type pandas infers.
    """
    path = Path(path)
    try:
        df = pd.read_csv(path)
    except (OSError, pd.errors.EmptyDataError, pd.errors.ParserError) as exc:
        raise EdgeFormatError(f"{path}: cannot read edge CSV ({exc})") from exc

    missing = [col for col in CSV_COLUMNS if col not in df.columns]
    if missing:
        raise EdgeFormatError(f"{path}: missing column(s) {', '.join(missing)}")

    blank = df[["source", "destination"]].isna().any(axis=1)
    if blank.any():
        pos = int(blank.to_numpy().nonzero()[0][0])
        raise EdgeFormatError(f"{path}: row {pos}: source and destination must not be empty")

    triples = []
    rows = zip(df["source"].tolist(), df["destination"].tolist(), df["weight"].tolist())
    for pos, (src, dst, w) in enumerate(rows):
        triples.append((src, dst, parse_weight(w, f"{path}: row {pos}")))

    logger.debug("read %d edges from %s", len(triples), path)
    return EdgeListSource(triples)


def _parse_label(token: str, where: str) -> int:
    try:
        label = int(token)
    except ValueError:
        raise EdgeFormatError(f"{where}: vertex label must be an integer, got {token!r}") from None
    if label < 0:
        raise EdgeFormatError(f"{where}: vertex label must be non-negative, got {label}")
    return label
