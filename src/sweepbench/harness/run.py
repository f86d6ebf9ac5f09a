"""Measurement run: the runner-side handle passed to a benchmark."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable

from .errors import BenchmarkProtocolError


@dataclass(slots=True)
class MeasurementRun:
    """One invocation of a benchmark with a fixed iteration count.

    Enforces the signalling order: `tic` once, `toc` once after `tic`,
    `end` once and last. Violations raise :class:`BenchmarkProtocolError`.
    """

    iterations: int
    clock: Callable[[], float] = time.perf_counter
    elapsed: float | None = None
    failures: list[str] = field(default_factory=list)
    passes: list[str] = field(default_factory=list)
    ended: bool = False
    _started_at: float | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        if isinstance(self.iterations, bool) or not isinstance(self.iterations, int) or self.iterations < 1:
            raise ValueError(f"iterations must be a positive integer, got {self.iterations!r}")

    def _check_open(self, signal: str) -> None:
        if self.ended:
            raise BenchmarkProtocolError(f"'{signal}' signalled after 'end'")

    def tic(self) -> None:
        self._check_open("tic")
        if self._started_at is not None or self.elapsed is not None:
            raise BenchmarkProtocolError("'tic' signalled more than once")
        self._started_at = self.clock()

    def toc(self) -> None:
        stopped_at = self.clock()
        self._check_open("toc")
        if self._started_at is None:
            raise BenchmarkProtocolError("'toc' signalled without a preceding 'tic'")
        self.elapsed = stopped_at - self._started_at
        self._started_at = None

    def fail(self, message: str) -> None:
        self._check_open("fail")
        self.failures.append(str(message))

    def pass_(self, message: str) -> None:
        self._check_open("pass")
        self.passes.append(str(message))

    def end(self) -> None:
        self._check_open("end")
        self.ended = True

    @property
    def ok(self) -> bool:
        return self.ended and not self.failures and bool(self.passes)

    @property
    def rate(self) -> float | None:
        """Operations per second, when the timed region was closed."""

        if not self.elapsed:
            return None
        return self.iterations / self.elapsed
