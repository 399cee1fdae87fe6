"""Skills-assessment engine: timed MCQ and voice sections with scored reports."""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
