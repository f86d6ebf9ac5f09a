"""TAP (Test Anything Protocol, version 13) rendering of a run summary."""

from __future__ import annotations

from sweepbench.harness.runner import RunSummary


def _yaml_block(iterations: int, elapsed: float, rate: float | None) -> list[str]:
    lines = ["  ---", f"  iterations: {iterations}", f"  elapsed: {elapsed:.9f}"]
    if rate is not None:
        lines.append(f"  rate: {rate:.3f}")
    lines.append("  ...")
    return lines


def format_tap(summary: RunSummary) -> str:
    lines = ["TAP version 13"]
    count = 0
    passed = 0
    failed = 0

    for case in summary.cases:
        lines.append(f"# {case.name}")
        for run in case.runs:
            if run.elapsed is not None:
                lines.extend(_yaml_block(run.iterations, run.elapsed, run.rate))
            for message in run.failures:
                count += 1
                failed += 1
                lines.append(f"not ok {count} {message}")
            for message in run.passes:
                count += 1
                passed += 1
                lines.append(f"ok {count} {message}")

    lines.append("")
    lines.append(f"1..{count}")
    lines.append(f"# total {count}")
    lines.append(f"# pass  {passed}")
    if failed:
        lines.append(f"# fail  {failed}")
    else:
        lines.append("")
        lines.append("# ok")
    return "\n".join(lines) + "\n"
