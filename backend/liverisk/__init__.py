"""LiveRisk - streaming per-instrument risk metrics and suggestions."""

__version__ = "0.1.0"
