"""Remote source protocol and error types.

Defines what the aggregator needs from the orchestrator:
- count_in_range(): number of events in a time range
- query_range(): Prometheus range query over a time range
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from datetime import datetime

__all__ = [
    "RemoteSource",
    "MagmaError",
    "MagmaAPIError",
    "MagmaTimeoutError",
    "MagmaConnectionError",
]


class MagmaError(Exception):
    """Base exception for orchestrator API operations."""

    pass


class MagmaAPIError(MagmaError):
    """Raised when the API answers with an error status or malformed body."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MagmaTimeoutError(MagmaError):
    """Raised when a request times out."""

    pass


class MagmaConnectionError(MagmaError):
    """Raised when the API cannot be reached."""

    pass


class RemoteSource(Protocol):
    """Protocol for event/alert sources.

    Any object with these two coroutines can feed the aggregator.
    """

    async def count_in_range(self, start: datetime, end: datetime) -> float:
        """Count events with timestamps in ``[start, end)``.

        Raises
        ------
        MagmaError
            On transport or API errors
        """
        ...

    async def query_range(
        self,
        start: datetime,
        end: datetime,
        step: str,
        query: str,
    ) -> dict[str, Any]:
        """Run a Prometheus range query.

        Parameters
        ----------
        start
            Range start
        end
            Range end
        step
            Resolution step, e.g. ``"15m"``
        query
            PromQL expression

        Returns
        -------
        dict
            ``{"data": {"result": [{"values": [[ts, "value"], ...]}, ...]}}``

        Raises
        ------
        MagmaError
            On transport or API errors
        """
        ...
