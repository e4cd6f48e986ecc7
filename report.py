"""
Text and CSV reports of solver results.
"""

from __future__ import annotations

from pathlib import Path
from typing import Hashable
import math

from all_pairs import AllPairsShortestPaths


def format_distance(distance: float) -> str:
    """'INF' for unreachable, otherwise six significant digits ('3', '0.3', '1e+20')."""
    if not math.isfinite(distance):
        return "INF"
    return f"{distance:g}"


def format_distance_line(src: Hashable, dst: Hashable, distance: float) -> str:
    return f"from: {src} to: {dst} - {format_distance(distance)}"


def write_distances(apsp: AllPairsShortestPaths, path: Path | str) -> int:
    """
    Write one line per ordered pair (source != destination).

    Returns the number of lines written.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    lines = 0
    with path.open("w") as f:
        for pair in apsp.pairs():
            f.write(format_distance_line(pair.source, pair.destination, pair.distance) + "\n")
            lines += 1
    return lines


def write_pairs_csv(apsp: AllPairsShortestPaths, path: Path | str, include_paths: bool = True) -> None:
    """CSV export of every ordered pair, with reconstructed paths by default."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    df = apsp.to_frame(include_paths=include_paths)
    if include_paths:
        df["path"] = ["-".join(str(v) for v in p) for p in df["path"]]
    df.to_csv(path, index=False)
