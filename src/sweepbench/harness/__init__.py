"""Benchmark harness: factory, sweep driver, measurement runs and runner."""

from .errors import (
    BenchmarkProtocolError,
    DuplicateBenchmarkError,
    InvalidLengthError,
    InvalidSweepConfigError,
    SweepBenchError,
)
from .factory import PASS_MESSAGE, LengthBenchmark, create_benchmark, measurement
from .models import BenchmarkCase, MeasurementHandle, benchmark_name
from .run import MeasurementRun
from .runner import BenchmarkRunner, CaseResult, RunnerConfig, RunSummary
from .sweep import SweepConfig, run_sweep, sweep_lengths

__all__ = [
    "BenchmarkCase",
    "BenchmarkProtocolError",
    "BenchmarkRunner",
    "CaseResult",
    "DuplicateBenchmarkError",
    "InvalidLengthError",
    "InvalidSweepConfigError",
    "LengthBenchmark",
    "MeasurementHandle",
    "MeasurementRun",
    "PASS_MESSAGE",
    "RunSummary",
    "RunnerConfig",
    "SweepBenchError",
    "SweepConfig",
    "benchmark_name",
    "create_benchmark",
    "measurement",
    "run_sweep",
    "sweep_lengths",
]
