from __future__ import annotations

import json
import os
import platform
import sys
import traceback
from dataclasses import dataclass
from datetime import datetime, timezone
from importlib import metadata
from pathlib import Path
from typing import Any, Callable
from uuid import uuid4


@dataclass(frozen=True, slots=True)
class ErrorReport:
    path: Path
    created_at: datetime


_ORIGINAL_SYS_EXCEPTHOOK = None


def get_error_reports_dir() -> Path:
    """Returns a writable directory for error reports.

    Priority:
    1) `SWEEPBENCH_ERROR_DIR` env var
    2) Project root: `./error_reports` (next to `pyproject.toml`)
    3) Fallback: `~/.sweepbench/error_reports`
    """

    override = (os.getenv("SWEEPBENCH_ERROR_DIR") or "").strip()
    if override:
        base = Path(override)
    else:
        project_root = _find_project_root()
        if project_root is not None:
            base = project_root / "error_reports"
        else:
            base = Path.home() / ".sweepbench" / "error_reports"

    base.mkdir(parents=True, exist_ok=True)
    return base


def _find_project_root() -> Path | None:
    """Returns the nearest directory containing `pyproject.toml` (best-effort)."""

    current = Path.cwd()
    for _ in range(25):
        if (current / "pyproject.toml").is_file():
            return current
        if current.parent == current:
            break
        current = current.parent
    return None


def _safe_app_version() -> str:
    try:
        return metadata.version("sweepbench")
    except metadata.PackageNotFoundError:
        return "unknown"


def write_error_report(
    error: BaseException,
    *,
    where: str,
    context: dict[str, Any] | None = None,
) -> ErrorReport:
    """Writes a timestamped error report and returns its path."""

    reports_dir = get_error_reports_dir()
    created_at = datetime.now(timezone.utc)
    stamp = created_at.strftime("%Y%m%d_%H%M%S")
    path = reports_dir / f"error_{stamp}_{uuid4().hex[:8]}.txt"

    header = {
        "created_at": created_at.isoformat(),
        "where": where,
        "app_version": _safe_app_version(),
        "python": sys.version.replace("\n", " "),
        "platform": platform.platform(),
        "argv": list(sys.argv),
        "cwd": str(Path.cwd()),
        "context": dict(context or {}),
        "error_type": type(error).__name__,
        "error_message": str(error),
    }

    tb = "".join(traceback.format_exception(type(error), error, error.__traceback__))

    content = (
        "sweepbench Error Report\n"
        "=======================\n\n"
        + json.dumps(header, ensure_ascii=False, indent=2, default=str)
        + "\n\nTraceback\n---------\n"
        + tb
    )

    path.write_text(content, encoding="utf-8", errors="replace")
    return ErrorReport(path=path, created_at=created_at)


def install_crash_reporting(*, context: Callable[[], dict[str, Any]] | None = None) -> None:
    """Installs a `sys.excepthook` that writes an error report for fatal errors.

    `context` is called when the hook fires; its result (e.g. the sweep
    configuration and the benchmark that was running) is added to the report.

    Notes:
    - Never raises; failures here must not prevent the benchmarks from running.
    - Can be disabled with `SWEEPBENCH_DISABLE_CRASH_HOOKS=1`.
    """

    if (os.getenv("SWEEPBENCH_DISABLE_CRASH_HOOKS") or "").strip().lower() in {"1", "true", "yes", "on"}:
        return

    # Avoid noisy interference in test runs unless explicitly enabled.
    if os.getenv("PYTEST_CURRENT_TEST") and (os.getenv("SWEEPBENCH_ENABLE_CRASH_HOOKS") or "").strip() != "1":
        return

    global _ORIGINAL_SYS_EXCEPTHOOK
    if _ORIGINAL_SYS_EXCEPTHOOK is None:
        _ORIGINAL_SYS_EXCEPTHOOK = sys.excepthook

    def _sys_excepthook(exc_type, exc, tb):  # type: ignore[no-untyped-def]
        details: dict[str, Any] = {"exc_type": getattr(exc_type, "__name__", str(exc_type))}
        if context is not None:
            try:
                details.update(context())
            except Exception as ctx_exc:
                details["context_error"] = repr(ctx_exc)
        try:
            write_error_report(
                exc if isinstance(exc, BaseException) else RuntimeError(str(exc)),
                where="sys.excepthook",
                context=details,
            )
        except OSError:
            pass
        if _ORIGINAL_SYS_EXCEPTHOOK is not None:
            _ORIGINAL_SYS_EXCEPTHOOK(exc_type, exc, tb)

    sys.excepthook = _sys_excepthook
