"""Contracts shared between benchmark definitions and the runner."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Protocol


class MeasurementHandle(Protocol):
    """Surface of a measurement run as seen by a benchmark."""

    iterations: int

    def tic(self) -> None:
        """Starts timing."""

    def toc(self) -> None:
        """Stops timing."""

    def fail(self, message: str) -> None:
        """Records a failure."""

    def pass_(self, message: str) -> None:
        """Records a success."""

    def end(self) -> None:
        """Terminates the run. Must be the last signal."""


BenchmarkFn = Callable[[MeasurementHandle], None]
RegisterFn = Callable[[str, BenchmarkFn], None]


def benchmark_name(pkg: str, length: int) -> str:
    return f"{pkg}:len={length}"


@dataclass(frozen=True, slots=True)
class BenchmarkCase:
    """A single (name, length, benchmark) unit of measurement."""

    name: str
    length: int
    benchmark: BenchmarkFn
