"""CLI entrypoint: run the length sweep and print TAP results."""

from __future__ import annotations

import logging
import sys
from argparse import ArgumentParser, Namespace
from functools import partial
from pathlib import Path

import structlog

from sweepbench.harness import BenchmarkRunner, RunnerConfig, SweepConfig, create_benchmark, run_sweep
from sweepbench.ops import DEFAULT_SEED
from sweepbench.reporting import format_tap, write_report
from sweepbench.shared import AppConfig, configure_logging, install_crash_reporting


def _build_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog="sweepbench",
        description="Benchmark an operation across a geometric sweep of input lengths.",
    )
    parser.add_argument(
        "--min-exponent",
        type=int,
        default=1,
        help="Smallest length is 10**MIN_EXPONENT (default: 1)",
    )
    parser.add_argument(
        "--max-exponent",
        type=int,
        default=6,
        help="Largest length is 10**MAX_EXPONENT (default: 6)",
    )
    parser.add_argument(
        "--iterations",
        type=int,
        help="Fixed iteration count per run (default: calibrated)",
    )
    parser.add_argument(
        "--repeats",
        type=int,
        default=3,
        help="Measurement runs per benchmark (default: 3)",
    )
    parser.add_argument(
        "--min-time",
        type=float,
        default=0.1,
        help="Minimum run duration in seconds when calibrating (default: 0.1)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=DEFAULT_SEED,
        help=f"Seed for fixture values (default: {DEFAULT_SEED})",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        help="Also write report files (see --format) into this directory",
    )
    parser.add_argument(
        "--stem",
        type=str,
        default="benchmark_report",
        help="Report filename stem (default: benchmark_report)",
    )
    parser.add_argument(
        "--format",
        action="append",
        dest="formats",
        choices=["json", "md", "tap"],
        help="Report format (can be provided multiple times). Default: json+md",
    )
    parser.add_argument(
        "--log-json",
        action="store_true",
        help="Emit logs as JSON lines",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show debug logs",
    )
    return parser


def _app_config(args: Namespace) -> AppConfig:
    return AppConfig(
        sweep=SweepConfig(min_exponent=args.min_exponent, max_exponent=args.max_exponent),
        runner=RunnerConfig(iterations=args.iterations, repeats=args.repeats, min_time=args.min_time),
        seed=args.seed,
    )


def _crash_context(config: AppConfig, runner: BenchmarkRunner) -> dict:
    return {
        "config": config.to_dict(),
        "registered": len(runner.cases),
        "running_benchmark": runner.current,
    }


def _run(config: AppConfig, runner: BenchmarkRunner, args: Namespace) -> int:
    logger = structlog.get_logger(__name__)

    cases = run_sweep(runner.register, config.sweep, factory=partial(create_benchmark, seed=config.seed), pkg=config.pkg)
    logger.info("sweep-registered", count=len(cases), lengths=[case.length for case in cases])

    summary = runner.run()
    sys.stdout.write(format_tap(summary))
    sys.stdout.flush()

    if args.output_dir is not None:
        formats = tuple(args.formats) if args.formats else ("json", "md")
        written = write_report(
            summary,
            output_dir=args.output_dir,
            stem=args.stem,
            formats=formats,
            config=config.to_dict(),
        )
        for path in written:
            logger.info("report-written", path=str(path))

    return 0 if summary.ok else 1


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(level=logging.DEBUG if args.verbose else logging.INFO, json=args.log_json)
    try:
        config = _app_config(args)
    except ValueError as exc:
        parser.error(str(exc))

    runner = BenchmarkRunner(config.runner)
    install_crash_reporting(context=partial(_crash_context, config, runner))
    return _run(config, runner, args)


if __name__ == "__main__":
    sys.exit(main())
