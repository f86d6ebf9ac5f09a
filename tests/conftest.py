"""Shared fixtures: a recording measurement handle and instrumented operations."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Sequence

import pytest
import structlog

from sweepbench.ops import NeumaierSum


@dataclass
class RecordingRun:
    """Measurement handle that records every signal in order."""

    iterations: int
    events: list[tuple[str, ...]] = field(default_factory=list)

    def tic(self) -> None:
        self.events.append(("tic",))

    def toc(self) -> None:
        self.events.append(("toc",))

    def fail(self, message: str) -> None:
        self.events.append(("fail", message))

    def pass_(self, message: str) -> None:
        self.events.append(("pass", message))

    def end(self) -> None:
        self.events.append(("end",))

    def names(self) -> list[str]:
        return [event[0] for event in self.events]

    def count(self, name: str) -> int:
        return self.names().count(name)


@dataclass
class CountingSum:
    """Wraps NeumaierSum, counting calls; can misbehave on a given call."""

    name: str = "counting_sum"
    inner: NeumaierSum = field(default_factory=NeumaierSum)
    calls: int = 0
    lengths: list[int] = field(default_factory=list)
    invalid_on: int | None = None
    raise_on: int | None = None

    def __call__(self, values: Sequence[float]) -> float:
        self.calls += 1
        self.lengths.append(len(values))
        if self.raise_on is not None and self.calls == self.raise_on:
            raise ZeroDivisionError("boom")
        if self.invalid_on is not None and self.calls == self.invalid_on:
            return math.nan
        return self.inner(values)

    def is_valid(self, result: float, values: Sequence[float]) -> bool:
        return self.inner.is_valid(result, values)

    def within_bounds(self, result: float, values: Sequence[float]) -> bool:
        return self.inner.within_bounds(result, values)

    def make_fixture(self, length: int, *, seed: int) -> list[float]:
        return self.inner.make_fixture(length, seed=seed)


class FakeClock:
    """Clock advancing by a fixed step on every read."""

    def __init__(self, step: float = 0.01) -> None:
        self.now = 0.0
        self.step = step

    def __call__(self) -> float:
        self.now += self.step
        return self.now


@pytest.fixture
def recording_run():
    return RecordingRun


@pytest.fixture
def counting_sum():
    return CountingSum


@pytest.fixture
def fake_clock():
    return FakeClock


@pytest.fixture(autouse=True)
def _restore_logging():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()
