"""Operations under test.

An operation is a callable over a float sequence plus the checks a benchmark
applies to its results: a cheap per-call validity predicate and an aggregate
bound evaluated once after the timed loop.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Protocol, Sequence

DEFAULT_SEED = 1337
DEFAULT_LOW = -100.0
DEFAULT_HIGH = 100.0


class Operation(Protocol):
    """Minimal interface for a benchmarked operation."""

    name: str

    def __call__(self, values: Sequence[float]) -> float:
        """Runs the operation once."""

    def is_valid(self, result: float, values: Sequence[float]) -> bool:
        """Per-call correctness check."""

    def within_bounds(self, result: float, values: Sequence[float]) -> bool:
        """Aggregate check on the last result, applied after the timed region."""

    def make_fixture(self, length: int, *, seed: int) -> list[float]:
        """Builds an input fixture of the given length."""


def uniform_values(length: int, *, seed: int, low: float = DEFAULT_LOW, high: float = DEFAULT_HIGH) -> list[float]:
    rng = random.Random(seed)
    return [rng.uniform(low, high) for _ in range(int(length))]


@dataclass(frozen=True, slots=True)
class NeumaierSum:
    """Compensated (Kahan-Babuska-Neumaier) summation."""

    name: str = "neumaier_sum"
    low: float = DEFAULT_LOW
    high: float = DEFAULT_HIGH

    def __call__(self, values: Sequence[float]) -> float:
        total = 0.0
        compensation = 0.0
        for v in values:
            t = total + v
            if abs(total) >= abs(v):
                compensation += (total - t) + v
            else:
                compensation += (v - t) + total
            total = t
        return total + compensation

    def is_valid(self, result: float, values: Sequence[float]) -> bool:
        return isinstance(result, float) and math.isfinite(result)

    def within_bounds(self, result: float, values: Sequence[float]) -> bool:
        """Agreement with the correctly rounded sum (`math.fsum`)."""

        if not values:
            return result == 0.0
        scale = len(values) * max(abs(v) for v in values)
        return math.isclose(result, math.fsum(values), rel_tol=1e-12, abs_tol=1e-12 * scale)

    def make_fixture(self, length: int, *, seed: int) -> list[float]:
        return uniform_values(length, seed=seed, low=self.low, high=self.high)
