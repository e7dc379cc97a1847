"""Command-line interface for citygraph."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from citygraph.benchmark import BenchmarkReporter, run_benchmarks
from citygraph.config import BENCHMARK_CONFIG, DEFAULT_DATASET, GENERATOR_CONFIG, GeneratorConfig
from citygraph.generator import generate_standard_datasets
from citygraph.graph.io import load_graph
from citygraph.logging import get_logger, set_global_log_level
from citygraph.pipeline import analyze_graph
from citygraph.report import render_analysis

logger = get_logger(__name__)


def _analyze(path: Path, source: Optional[int]) -> int:
    try:
        graph, file_source = load_graph(path)
        result = analyze_graph(graph, file_source if source is None else source)
    except (OSError, ValueError) as exc:
        logger.error(f"Error analyzing {path}: {exc}")
        return 1

    print(render_analysis(result))
    return 0


def _benchmark(data_dir: Path, report: Optional[Path]) -> int:
    run = run_benchmarks(data_dir)
    if not run.results:
        logger.error(f"No datasets could be benchmarked under {data_dir}")
        return 1

    reporter = BenchmarkReporter(run.results)
    reporter.write_report(report or Path(BENCHMARK_CONFIG.report_name))
    print(reporter.summary())
    if run.failures:
        print(f"\n{len(run.failures)} dataset(s) failed; see log for details.")
    return 0


def _generate(output_dir: Path, seed: Optional[int]) -> int:
    config = GENERATOR_CONFIG
    if seed is not None:
        config = GeneratorConfig(master_seed=seed)
    try:
        written = generate_standard_datasets(output_dir, config)
    except OSError as exc:
        logger.error(f"Error writing datasets to {output_dir}: {exc}")
        return 1
    print(f"Total datasets created: {len(written)}")
    for name, path in written.items():
        print(f"  - {name}: {path}")
    return 0


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the ``citygraph`` command.

    Args:
        argv: Optional list of command-line arguments. If ``None``, ``sys.argv``
            is used.

    Raises:
        SystemExit: With status 1 when a command fails.
    """
    parser = argparse.ArgumentParser(
        prog="citygraph",
        description="Analyze task dependency graphs: SCCs, condensation, ordering and DAG paths.",
    )

    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "--quiet", action="store_true", help="Only log warnings and errors"
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
        title="Available commands",
        metavar="{analyze,benchmark,generate}",
        help="Available commands",
    )

    analyze_parser = subparsers.add_parser("analyze", help="Analyze one graph file")
    analyze_parser.add_argument(
        "graph",
        type=Path,
        nargs="?",
        default=Path(DEFAULT_DATASET),
        help=f"Path to graph JSON/YAML (default: {DEFAULT_DATASET})",
    )
    analyze_parser.add_argument(
        "--source",
        "-s",
        type=int,
        default=None,
        help="Override the source vertex given in the file",
    )

    bench_parser = subparsers.add_parser(
        "benchmark", help="Benchmark every dataset under a data directory"
    )
    bench_parser.add_argument(
        "--data-dir",
        "-d",
        type=Path,
        default=Path(BENCHMARK_CONFIG.data_dir),
        help="Directory holding small/, medium/ and large/ datasets",
    )
    bench_parser.add_argument(
        "--report",
        "-r",
        type=Path,
        default=None,
        help=f"Report file (default: {BENCHMARK_CONFIG.report_name})",
    )

    gen_parser = subparsers.add_parser("generate", help="Generate the standard datasets")
    gen_parser.add_argument(
        "--output-dir",
        "-o",
        type=Path,
        default=Path(BENCHMARK_CONFIG.data_dir),
        help="Directory to write datasets into",
    )
    gen_parser.add_argument(
        "--seed", type=int, default=None, help="Master seed for generation"
    )

    effective_args = sys.argv[1:] if argv is None else argv

    if not effective_args:
        parser.print_help()
        raise SystemExit(0)

    args = parser.parse_args(effective_args)

    if args.verbose:
        set_global_log_level(logging.DEBUG)
        logger.debug("Debug logging enabled")
    elif args.quiet:
        set_global_log_level(logging.WARNING)

    if args.command == "analyze":
        status = _analyze(args.graph, args.source)
    elif args.command == "benchmark":
        status = _benchmark(args.data_dir, args.report)
    else:
        status = _generate(args.output_dir, args.seed)

    if status != 0:
        raise SystemExit(status)


if __name__ == "__main__":
    main()
