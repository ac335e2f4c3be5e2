"""Observability module for alertchart.

Provides loguru logging and timing instrumentation.
"""

from .loguru_config import configure_loguru, get_logger, timing_context

__all__ = [
    "configure_loguru",
    "get_logger",
    "timing_context",
]
