"""Benchmark factory.

`create_benchmark(length)` builds the input fixture once and returns a
callable benchmark bound to it. Each call of the benchmark performs one
measurement run:

1. precondition check on the fixture (outside the timed region),
2. `tic`, then the operation `b.iterations` times, then `toc`,
3. aggregate check on the last result,
4. `pass_` when nothing failed, and always `end` last.

Signalling goes through :func:`measurement`, which owns the terminal
`pass_`/`end` calls so that `end` fires exactly once on every exit path.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Sequence

from sweepbench.ops import DEFAULT_SEED, NeumaierSum, Operation

from .errors import BenchmarkProtocolError, InvalidLengthError
from .models import MeasurementHandle

PASS_MESSAGE = "benchmark finished"


class _Outcome:
    """Tracks what a benchmark has signalled inside a measurement scope."""

    __slots__ = ("_run", "failed", "timing")

    def __init__(self, run: MeasurementHandle) -> None:
        self._run = run
        self.failed = False
        self.timing = False

    def tic(self) -> None:
        self._run.tic()
        self.timing = True

    def toc(self) -> None:
        self.timing = False
        self._run.toc()

    def fail(self, message: str) -> None:
        self.failed = True
        self._run.fail(message)


@contextmanager
def measurement(run: MeasurementHandle) -> Iterator[_Outcome]:
    """Scopes one measurement run; converts exceptions into `fail`."""

    outcome = _Outcome(run)
    try:
        yield outcome
    except BenchmarkProtocolError:
        raise
    except Exception as exc:
        if outcome.timing:
            outcome.toc()
        outcome.fail(f"{type(exc).__name__}: {exc}")
    else:
        if not outcome.failed:
            run.pass_(PASS_MESSAGE)
    finally:
        run.end()


class LengthBenchmark:
    """Benchmark of one operation against a fixture of fixed length."""

    __slots__ = ("length", "fixture", "operation")

    def __init__(self, length: int, fixture: Sequence[float], operation: Operation) -> None:
        self.length = length
        self.fixture = fixture
        self.operation = operation

    def __repr__(self) -> str:
        return f"LengthBenchmark(length={self.length}, operation={self.operation.name!r})"

    def __call__(self, b: MeasurementHandle) -> None:
        op = self.operation
        values = self.fixture

        with measurement(b) as outcome:
            if len(values) != self.length:
                outcome.fail(f"fixture has length {len(values)}, expected {self.length}")

            # tic/toc stay paired even when the precondition failed.
            result = None
            outcome.tic()
            for i in range(0 if outcome.failed else b.iterations):
                result = op(values)
                if not op.is_valid(result, values):
                    outcome.fail(f"{op.name} returned an invalid result on iteration {i + 1}: {result!r}")
                    break
            outcome.toc()

            if result is not None and not outcome.failed and not op.within_bounds(result, values):
                outcome.fail(f"{op.name} result {result!r} failed the aggregate check")


def create_benchmark(length: int, *, operation: Operation | None = None, seed: int = DEFAULT_SEED) -> LengthBenchmark:
    """Creates a benchmark for a fixture of `length` elements.

    Raises:
        InvalidLengthError: `length` is not a positive integer.
    """

    if isinstance(length, bool) or not isinstance(length, int) or length < 1:
        raise InvalidLengthError(f"length must be a positive integer, got {length!r}")

    op = operation if operation is not None else NeumaierSum()
    fixture = op.make_fixture(length, seed=seed)
    return LengthBenchmark(length, fixture, op)
