"""
CLI to solve edge-list files and time the relaxation.

Two modes:

* ``benchmark_runner.py INPUT OUTPUT`` solves one edge file and writes the
  distance report.
* ``benchmark_runner.py --config experiments/benchmarks.yml`` runs every entry
  of a benchmark config and writes a timings CSV next to the reports.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence
import argparse
import csv
import logging
import sys
import time

import yaml

from all_pairs import AllPairsShortestPaths
from edge_readers import read_edge_csv, read_edge_file
from edges import EdgeFormatError, EdgeSource
from floyd_warshall_engine import ENGINES, make_engine
from report import write_distances

logger = logging.getLogger(__name__)

TIMING_FIELDS = ["name", "input", "output", "engine", "vertices", "edges", "reachable_pairs", "relax_ms"]


@dataclass(frozen=True)
class BenchmarkConfig:
    name: str
    input: str
    output: str


@dataclass(frozen=True)
class Config:
    input_dir: Path
    output_dir: Path
    engine: str
    runs: Sequence[BenchmarkConfig]
    timings_csv: Optional[Path] = None
    log_level: str = "INFO"


def load_config(path: Path) -> Config:
    """
    Load a benchmark config. Relative directories resolve against the config
    file's directory.
    """
    data = yaml.safe_load(path.read_text()) or {}
    base = path.parent

    engine = str(data.get("engine", "vectorised"))
    if engine not in ENGINES:
        raise ValueError(f"Unknown relaxation engine '{engine}' in {path}")

    runs = [
        BenchmarkConfig(name=str(run["name"]), input=str(run["input"]), output=str(run["output"]))
        for run in data["runs"]
    ]
    timings = data.get("timings_csv")
    return Config(
        input_dir=base / data["input_dir"],
        output_dir=base / data["output_dir"],
        engine=engine,
        runs=runs,
        timings_csv=(base / timings) if timings else None,
        log_level=str(data.get("log_level", "INFO")).upper(),
    )


def load_edges(path: Path) -> EdgeSource:
    """Pick a reader by suffix: .csv goes through pandas, anything else is the count-prefixed format."""
    if path.suffix.lower() == ".csv":
        return read_edge_csv(path)
    return read_edge_file(path)


def run_single(name: str, input_path: Path, output_path: Path, engine: str = "vectorised") -> Dict[str, object]:
    """Solve one edge file, write its report, and return timing metrics."""
    source = load_edges(input_path)
    apsp = AllPairsShortestPaths(source, engine=make_engine(engine))

    start = time.perf_counter()
    apsp.generate_distance_matrix()
    relax_ms = (time.perf_counter() - start) * 1000.0

    write_distances(apsp, output_path)
    reachable = sum(1 for pair in apsp.pairs() if pair.reachable)
    return {
        "name": name,
        "input": str(input_path),
        "output": str(output_path),
        "engine": engine,
        "vertices": apsp.index.size(),
        "edges": len(list(source.edges())),
        "reachable_pairs": reachable,
        "relax_ms": relax_ms,
    }


def run_benchmarks(config_path: Path, engine: Optional[str] = None) -> List[Dict[str, object]]:
    cfg = load_config(config_path)
    engine = engine or cfg.engine
    start = time.time()

    logger.info("[run] queued %d benchmark(s) with engine=%s", len(cfg.runs), engine)
    results: List[Dict[str, object]] = []
    for run in cfg.runs:
        res = run_single(run.name, cfg.input_dir / run.input, cfg.output_dir / run.output, engine=engine)
        results.append(res)
        logger.info(
            "[run] completed %s vertices=%d edges=%d duration=%.2fms",
            run.name,
            res["vertices"],
            res["edges"],
            res["relax_ms"],
        )

    if cfg.timings_csv:
        write_timings_csv(results, cfg.timings_csv)

    logger.info("[run] completed %d run(s) in %.2fs", len(results), time.time() - start)
    return results


def write_timings_csv(results: List[Dict[str, object]], path: Path) -> None:
    """
    Write per-run timings to CSV for downstream analysis.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=TIMING_FIELDS)
        writer.writeheader()
        for res in results:
            writer.writerow({key: res.get(key) for key in TIMING_FIELDS})


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="All-pairs shortest paths over edge-list files.")
    parser.add_argument("input", nargs="?", type=Path, help="edge file to load")
    parser.add_argument("output", nargs="?", type=Path, help="distance report to write")
    parser.add_argument("--config", type=Path, help="benchmark config (YAML)")
    parser.add_argument("--engine", choices=sorted(ENGINES), help="relaxation engine")
    parser.add_argument("--log-level", default=None, help="logging level (default INFO)")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.config is None and (args.input is None or args.output is None):
        parser.error("either INPUT OUTPUT or --config is required")
    if args.config is not None and args.input is not None:
        parser.error("INPUT OUTPUT and --config are mutually exclusive")

    level = args.log_level
    if level is None and args.config is not None and args.config.exists():
        level = load_config(args.config).log_level
    logging.basicConfig(level=(level or "INFO").upper(), format="%(levelname)s %(name)s: %(message)s")

    try:
        if args.config is not None:
            run_benchmarks(args.config, engine=args.engine)
        else:
            res = run_single(args.input.stem, args.input, args.output, engine=args.engine or "vectorised")
            logger.info("[run] wrote %s (%.2fms)", res["output"], res["relax_ms"])
    except (EdgeFormatError, OSError) as exc:
        logger.error("[run] failed: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
