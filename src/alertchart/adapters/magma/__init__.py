"""Orchestrator API adapter for alertchart.

Provides the remote source used by the aggregator:
- Event counts over a time range
- Prometheus range queries
"""

from .api_client import MagmaAPIClient
from .source import (
    MagmaAPIError,
    MagmaConnectionError,
    MagmaError,
    MagmaTimeoutError,
    RemoteSource,
)

__all__ = [
    "RemoteSource",
    "MagmaAPIClient",
    "MagmaError",
    "MagmaAPIError",
    "MagmaTimeoutError",
    "MagmaConnectionError",
]
