"""Result rendering: TAP stream and JSON/Markdown reports."""

from .report import SweepReport, build_report, write_report
from .tap import format_tap

__all__ = ["SweepReport", "build_report", "format_tap", "write_report"]
