"""Focus-aware notifications for long-running coding agents."""

__version__ = "0.1.0"
