"""Benchmark runner.

Holds named benchmarks and executes them one after another. For each case the
runner picks an iteration count (fixed, or calibrated until a run lasts at
least `min_time` seconds), then performs `repeats` measurement runs with it.
A case passes only if every run ended cleanly with no failure.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable

import structlog

from .errors import DuplicateBenchmarkError
from .models import BenchmarkFn
from .run import MeasurementRun


@dataclass(frozen=True, slots=True)
class RunnerConfig:
    """Runner settings. `iterations=None` enables calibration."""

    iterations: int | None = None
    repeats: int = 3
    min_time: float = 0.1
    max_iterations: int = 10**8

    def __post_init__(self) -> None:
        if self.iterations is not None and self.iterations < 1:
            raise ValueError(f"iterations must be positive, got {self.iterations}")
        if self.repeats < 1:
            raise ValueError(f"repeats must be positive, got {self.repeats}")
        if self.min_time < 0:
            raise ValueError(f"min_time must be >= 0, got {self.min_time}")
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be positive, got {self.max_iterations}")


@dataclass(frozen=True, slots=True)
class CaseResult:
    name: str
    iterations: int
    runs: tuple[MeasurementRun, ...]

    @property
    def ok(self) -> bool:
        return bool(self.runs) and all(run.ok for run in self.runs)

    @property
    def elapsed(self) -> list[float | None]:
        return [run.elapsed for run in self.runs]

    @property
    def rates(self) -> list[float | None]:
        return [run.rate for run in self.runs]

    @property
    def failures(self) -> list[str]:
        return [msg for run in self.runs for msg in run.failures]

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "status": "ok" if self.ok else "failed",
            "iterations": self.iterations,
            "elapsed": self.elapsed,
            "rates": self.rates,
            "failures": self.failures,
        }


@dataclass(frozen=True, slots=True)
class RunSummary:
    cases: tuple[CaseResult, ...]

    @property
    def total(self) -> int:
        return len(self.cases)

    @property
    def passed(self) -> int:
        return sum(1 for case in self.cases if case.ok)

    @property
    def failed(self) -> int:
        return self.total - self.passed

    @property
    def ok(self) -> bool:
        return self.failed == 0


class BenchmarkRunner:
    """Registers named benchmarks and runs them sequentially."""

    def __init__(self, config: RunnerConfig | None = None, *, clock: Callable[[], float] = time.perf_counter) -> None:
        self.config = config if config is not None else RunnerConfig()
        self._clock = clock
        self._cases: dict[str, BenchmarkFn] = {}
        # Name of the case being executed; left set if a fatal error escapes it.
        self.current: str | None = None
        self._logger = structlog.get_logger(__name__)

    @property
    def cases(self) -> list[str]:
        return list(self._cases)

    def register(self, name: str, benchmark: BenchmarkFn) -> None:
        if not callable(benchmark):
            raise TypeError(f"benchmark for {name!r} is not callable")
        if name in self._cases:
            raise DuplicateBenchmarkError(f"benchmark already registered: {name}")
        self._cases[name] = benchmark

    def run(self) -> RunSummary:
        results = tuple(self._run_case(name, benchmark) for name, benchmark in self._cases.items())
        summary = RunSummary(cases=results)
        self._logger.info("benchmarks-complete", total=summary.total, passed=summary.passed, failed=summary.failed)
        return summary

    def _measure(self, name: str, benchmark: BenchmarkFn, iterations: int) -> MeasurementRun:
        run = MeasurementRun(iterations=iterations, clock=self._clock)
        try:
            benchmark(run)
        except Exception as exc:
            self._logger.exception("benchmark-raised", benchmark=name, error=str(exc))
            # The run may already be closed; record directly instead of signalling.
            run.failures.append(f"{type(exc).__name__}: {exc}")
            run.ended = True
            return run

        if not run.ended:
            run.failures.append("benchmark returned without signalling 'end'")
            run.ended = True
        return run

    def _calibrate(self, name: str, benchmark: BenchmarkFn) -> MeasurementRun:
        limit = self.config.max_iterations
        iterations = 1
        while True:
            run = self._measure(name, benchmark, iterations)
            if not run.ok:
                return run
            if (run.elapsed or 0.0) >= self.config.min_time or iterations >= limit:
                return run
            iterations = min(iterations * 10, limit)

    def _run_case(self, name: str, benchmark: BenchmarkFn) -> CaseResult:
        self.current = name
        log = self._logger.bind(benchmark=name)
        log.debug("benchmark-start")

        if self.config.iterations is None:
            calibrated = self._calibrate(name, benchmark)
            if not calibrated.ok:
                log.warning("benchmark-failed", phase="calibration", failures=calibrated.failures)
                self.current = None
                return CaseResult(name=name, iterations=calibrated.iterations, runs=(calibrated,))
            iterations = calibrated.iterations
            log.debug("benchmark-calibrated", iterations=iterations)
        else:
            iterations = self.config.iterations

        runs: list[MeasurementRun] = []
        for _ in range(self.config.repeats):
            run = self._measure(name, benchmark, iterations)
            runs.append(run)
            if not run.ok:
                break

        result = CaseResult(name=name, iterations=iterations, runs=tuple(runs))
        self.current = None
        if result.ok:
            log.info("benchmark-finished", iterations=iterations, elapsed=result.elapsed)
        else:
            log.warning("benchmark-failed", failures=result.failures)
        return result
