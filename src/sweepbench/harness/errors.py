"""Exceptions raised by the benchmark harness."""

from __future__ import annotations


class SweepBenchError(RuntimeError):
    """Base error for the harness."""


class InvalidLengthError(SweepBenchError, ValueError):
    """A benchmark was requested for a non-positive or non-integer length."""


class InvalidSweepConfigError(SweepBenchError, ValueError):
    """The exponent range of a sweep is invalid."""


class BenchmarkProtocolError(SweepBenchError):
    """A benchmark misused its measurement run (e.g. signalled after `end`)."""


class DuplicateBenchmarkError(SweepBenchError):
    """A benchmark name was registered more than once."""
