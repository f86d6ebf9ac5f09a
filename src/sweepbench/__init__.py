"""sweepbench package initialisation."""

PKG = "sweepbench"

__all__ = [
    "PKG",
    "harness",
    "ops",
    "reporting",
    "shared",
]
