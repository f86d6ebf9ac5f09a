"""Size sweep driver."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterator

from sweepbench import PKG

from .errors import InvalidSweepConfigError
from .factory import create_benchmark
from .models import BenchmarkCase, BenchmarkFn, RegisterFn, benchmark_name


@dataclass(frozen=True, slots=True)
class SweepConfig:
    """Exponent range of a sweep: lengths 10**min_exponent .. 10**max_exponent."""

    min_exponent: int = 1
    max_exponent: int = 6

    def __post_init__(self) -> None:
        if self.min_exponent < 0:
            raise InvalidSweepConfigError(f"min_exponent must be >= 0, got {self.min_exponent}")
        if self.max_exponent < self.min_exponent:
            raise InvalidSweepConfigError(
                f"max_exponent ({self.max_exponent}) must be >= min_exponent ({self.min_exponent})"
            )


def sweep_lengths(config: SweepConfig) -> Iterator[int]:
    for i in range(config.min_exponent, config.max_exponent + 1):
        yield 10**i


def run_sweep(
    register: RegisterFn,
    config: SweepConfig | None = None,
    *,
    factory: Callable[[int], BenchmarkFn] = create_benchmark,
    pkg: str = PKG,
) -> list[BenchmarkCase]:
    """Registers one benchmark per length of the sweep, in ascending order.

    Errors raised by `factory` or `register` propagate unchanged.
    """

    config = config if config is not None else SweepConfig()
    cases: list[BenchmarkCase] = []
    for length in sweep_lengths(config):
        benchmark = factory(length)
        name = benchmark_name(pkg, length)
        register(name, benchmark)
        cases.append(BenchmarkCase(name=name, length=length, benchmark=benchmark))
    return cases
