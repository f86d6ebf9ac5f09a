"""Sweep report generation (JSON/Markdown/TAP files)."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable

from sweepbench.harness.runner import RunSummary

from .tap import format_tap

SUFFIXES = {"json": "json", "md": "md", "tap": "tap"}


@dataclass(frozen=True, slots=True)
class SweepReport:
    created_at: str
    totals: dict[str, int]
    cases: list[dict]
    config: dict[str, Any] = field(default_factory=dict)

    def to_json(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False, indent=2)

    def to_markdown(self) -> str:
        lines: list[str] = []
        lines.append("# Benchmark Report")
        lines.append("")
        lines.append(f"Generated: {self.created_at}")
        lines.append("")
        lines.append(
            f"Cases: {self.totals.get('total', 0)} "
            f"(passed {self.totals.get('passed', 0)}, failed {self.totals.get('failed', 0)})"
        )
        lines.append("")

        if self.config:
            lines.append("### Configuration")
            for key in sorted(self.config):
                lines.append(f"- {key}: {self.config[key]}")
            lines.append("")

        if self.cases:
            lines.append("| benchmark | status | iterations | elapsed (s) | rate (ops/s) |")
            lines.append("| --- | --- | ---: | --- | --- |")
            for case in self.cases:
                elapsed = ", ".join(_fmt(v, ".6f") for v in case.get("elapsed", []))
                rates = ", ".join(_fmt(v, ".1f") for v in case.get("rates", []))
                lines.append(
                    f"| {case.get('name', 'unknown')} | {case.get('status', 'ok')} "
                    f"| {case.get('iterations', '')} | {elapsed} | {rates} |"
                )
            lines.append("")

        for case in self.cases:
            failures = case.get("failures") or []
            if not failures:
                continue
            lines.append(f"## {case.get('name', 'unknown')}")
            lines.append("")
            lines.append("### Failures")
            for msg in failures:
                lines.append(f"- {msg}")
            lines.append("")

        return "\n".join(lines).rstrip() + "\n"


def _fmt(value: float | None, pattern: str) -> str:
    return "n/a" if value is None else format(value, pattern)


def build_report(summary: RunSummary, *, config: dict[str, Any] | None = None) -> SweepReport:
    created_at = datetime.now(timezone.utc).isoformat()
    return SweepReport(
        created_at=created_at,
        totals={"total": summary.total, "passed": summary.passed, "failed": summary.failed},
        cases=[case.to_dict() for case in summary.cases],
        config=dict(config or {}),
    )


def write_report(
    summary: RunSummary,
    *,
    output_dir: Path,
    stem: str = "benchmark_report",
    formats: tuple[str, ...] = ("json", "md"),
    config: dict[str, Any] | None = None,
) -> list[Path]:
    """Writes one file per requested format (`json`, `md`, `tap`) and returns their paths."""

    unknown = [fmt for fmt in formats if fmt not in SUFFIXES]
    if unknown:
        raise ValueError(f"unsupported report format(s): {', '.join(unknown)}")

    report = build_report(summary, config=config)
    renderers: dict[str, Callable[[], str]] = {
        "json": report.to_json,
        "md": report.to_markdown,
        "tap": lambda: format_tap(summary),
    }

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    written: list[Path] = []
    for fmt in dict.fromkeys(formats):
        path = output_dir / f"{stem}.{SUFFIXES[fmt]}"
        path.write_text(renderers[fmt](), encoding="utf-8")
        written.append(path)
    return written
