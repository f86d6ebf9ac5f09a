"""Tests for the benchmark factory and its measurement protocol."""

from __future__ import annotations

import pytest

from sweepbench.harness import PASS_MESSAGE, InvalidLengthError, LengthBenchmark, create_benchmark
from sweepbench.harness.errors import BenchmarkProtocolError
from sweepbench.harness.factory import measurement
from sweepbench.ops import NeumaierSum


def test_successful_run_signals_in_order(recording_run, counting_sum) -> None:
    op = counting_sum()
    bench = create_benchmark(10, operation=op)
    run = recording_run(iterations=5)

    bench(run)

    assert op.calls == 5
    assert op.lengths == [10] * 5
    assert run.events == [("tic",), ("toc",), ("pass", PASS_MESSAGE), ("end",)]


def test_invalid_result_fails_before_end(recording_run, counting_sum) -> None:
    op = counting_sum(invalid_on=3)
    bench = create_benchmark(10, operation=op)
    run = recording_run(iterations=5)

    bench(run)

    names = run.names()
    assert names.count("fail") >= 1
    assert names.count("end") == 1
    assert names[-1] == "end"
    assert names.index("fail") < names.index("end")
    assert "pass" not in names
    assert "iteration 3" in run.events[names.index("fail")][1]
    assert names == ["tic", "fail", "toc", "end"]
    assert op.calls == 3


def test_exception_in_loop_is_converted_to_fail(recording_run, counting_sum) -> None:
    op = counting_sum(raise_on=2)
    bench = create_benchmark(4, operation=op)
    run = recording_run(iterations=5)

    bench(run)

    assert run.names() == ["tic", "toc", "fail", "end"]
    assert run.events[2][1] == "ZeroDivisionError: boom"


def test_length_one_uses_same_protocol(recording_run, counting_sum) -> None:
    op = counting_sum()
    bench = create_benchmark(1, operation=op)
    run = recording_run(iterations=3)

    bench(run)

    assert len(bench.fixture) == 1
    assert op.calls == 3
    assert run.names() == ["tic", "toc", "pass", "end"]


def test_iterations_are_read_from_the_run(recording_run, counting_sum) -> None:
    op = counting_sum()
    bench = create_benchmark(100, operation=op)

    bench(recording_run(iterations=1))
    bench(recording_run(iterations=7))

    assert op.calls == 8


def test_fixture_is_built_once_and_reused(recording_run, counting_sum) -> None:
    bench = create_benchmark(10, operation=counting_sum())
    fixture = bench.fixture

    bench(recording_run(iterations=2))
    bench(recording_run(iterations=2))

    assert bench.fixture is fixture
    assert len(fixture) == 10


def test_same_length_yields_independent_benchmarks(recording_run) -> None:
    a = create_benchmark(10)
    b = create_benchmark(10)

    assert a is not b
    assert a.fixture is not b.fixture
    assert a.fixture == b.fixture

    a.fixture[0] = 12345.0
    run = recording_run(iterations=2)
    b(run)
    assert b.fixture[0] != 12345.0
    assert run.names() == ["tic", "toc", "pass", "end"]


def test_fixture_values_are_real_finite_floats() -> None:
    bench = create_benchmark(1000)

    assert isinstance(bench, LengthBenchmark)
    assert all(isinstance(v, float) for v in bench.fixture)
    assert all(-100.0 <= v < 100.0 for v in bench.fixture)


def test_fixture_depends_on_seed() -> None:
    assert create_benchmark(50, seed=1).fixture == create_benchmark(50, seed=1).fixture
    assert create_benchmark(50, seed=1).fixture != create_benchmark(50, seed=2).fixture


def test_precondition_violation_skips_the_loop_but_keeps_tic_toc(recording_run, counting_sum) -> None:
    op = counting_sum()
    bench = create_benchmark(10, operation=op)
    bench.fixture = bench.fixture[:5]
    run = recording_run(iterations=3)

    bench(run)

    assert op.calls == 0
    assert run.names() == ["fail", "tic", "toc", "end"]
    assert "expected 10" in run.events[0][1]


def test_failed_aggregate_check_fails(recording_run, counting_sum) -> None:
    op = counting_sum()
    op.within_bounds = lambda result, values: False
    bench = create_benchmark(10, operation=op)
    run = recording_run(iterations=2)

    bench(run)

    assert run.names() == ["tic", "toc", "fail", "end"]
    assert "failed the aggregate check" in run.events[2][1]


@pytest.mark.parametrize("length", [0, -1, 2.5, "10", True, None])
def test_rejects_invalid_length(length) -> None:
    with pytest.raises(InvalidLengthError):
        create_benchmark(length)  # type: ignore[arg-type]


def test_invalid_length_error_is_value_error() -> None:
    with pytest.raises(ValueError):
        create_benchmark(0)


def test_measurement_scope_ends_once_without_pass_after_fail(recording_run) -> None:
    run = recording_run(iterations=1)

    with measurement(run) as outcome:
        outcome.fail("nope")

    assert run.names() == ["fail", "end"]


def test_measurement_scope_reraises_protocol_errors(recording_run) -> None:
    run = recording_run(iterations=1)

    with pytest.raises(BenchmarkProtocolError):
        with measurement(run):
            raise BenchmarkProtocolError("misuse")

    assert run.names() == ["end"]


class _ConstantSum:
    """Returns a plausible but wrong float on every call."""

    name = "constant_sum"

    def __init__(self, value: float = 0.0) -> None:
        self.value = value
        self.inner = NeumaierSum()
        self.calls = 0

    def __call__(self, values) -> float:
        self.calls += 1
        return self.value

    def is_valid(self, result, values) -> bool:
        return self.inner.is_valid(result, values)

    def within_bounds(self, result, values) -> bool:
        return self.inner.within_bounds(result, values)

    def make_fixture(self, length: int, *, seed: int) -> list[float]:
        return self.inner.make_fixture(length, seed=seed)


def test_wrong_answer_fails_before_end(recording_run) -> None:
    op = _ConstantSum(0.0)
    bench = create_benchmark(1000, operation=op)
    run = recording_run(iterations=5)

    bench(run)

    names = run.names()
    assert op.calls == 5
    assert names == ["tic", "toc", "fail", "end"]
    assert "pass" not in names
    assert run.events[2][1] == "constant_sum result 0.0 failed the aggregate check"


def test_slightly_wrong_answer_is_caught_on_large_fixture(recording_run) -> None:
    bench = create_benchmark(10**5)
    op = _ConstantSum(bench.operation(bench.fixture) + 1.0)
    bench.operation = op
    run = recording_run(iterations=2)

    bench(run)

    assert run.names() == ["tic", "toc", "fail", "end"]
