"""Application configuration."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

from sweepbench import PKG
from sweepbench.harness.runner import RunnerConfig
from sweepbench.harness.sweep import SweepConfig
from sweepbench.ops import DEFAULT_SEED


@dataclass(slots=True)
class AppConfig:
    """Settings for one invocation of the benchmark sweep."""

    sweep: SweepConfig = field(default_factory=SweepConfig)
    runner: RunnerConfig = field(default_factory=RunnerConfig)
    seed: int = DEFAULT_SEED
    pkg: str = PKG

    @classmethod
    def default(cls) -> "AppConfig":
        """Default configuration: lengths 10 .. 10**6, calibrated iterations."""

        return cls()

    def to_dict(self) -> dict[str, Any]:
        """Flat view used in reports and crash reports."""

        return {**asdict(self.sweep), **asdict(self.runner), "seed": self.seed, "pkg": self.pkg}
