"""Event and alert dataset aggregation.

Builds the two series of the network dashboard panel:

1. Pick a granularity for the requested interval
2. Split the interval into buckets of that granularity
3. Fire one event-count request per bucket and one alerts range query,
   all concurrently on the running event loop
4. Merge the answers into an "Alerts" and an "Events" series

A failed bucket becomes a zero point and the rest of the chart survives.
A failed alerts query empties both series. Either way the caller is
notified once through ``on_error`` and nothing is raised.
"""

from __future__ import annotations

import asyncio
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Generic, TypeVar

from ..core.time import epoch_seconds
from ..observability import get_logger, timing_context
from .buckets import Bucket, TimeInterval, partition
from .series import DataPoint, Series, alerts_series, events_series
from .steps import Granularity, select_step

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ..adapters.magma.source import RemoteSource

__all__ = [
    "ALERTS_QUERY",
    "ERROR_MESSAGE",
    "AggregationError",
    "BucketFetchError",
    "FetchResult",
    "RangeFetchError",
    "aggregate",
    "alert_points",
    "event_point",
    "fetch_alerts",
    "fetch_event_counts",
]

ALERTS_QUERY = "sum(ALERTS)"
ERROR_MESSAGE = "Error getting event counts"

T = TypeVar("T")

log = get_logger("aggregator")


class AggregationError(Exception):
    """Base exception for dataset aggregation failures."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class BucketFetchError(AggregationError):
    """One bucket's event count could not be fetched."""

    def __init__(self, bucket: Bucket, cause: BaseException | None = None) -> None:
        super().__init__(
            f"Event count failed for {bucket.start.isoformat()} -> {bucket.end.isoformat()}: {cause}",
            cause,
        )
        self.bucket = bucket


class RangeFetchError(AggregationError):
    """The alerts range query failed or returned an unusable body."""

    pass


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    """Outcome of one remote call: a value or the error that replaced it."""

    value: T | None = None
    error: AggregationError | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @classmethod
    def ok(cls, value: T) -> FetchResult[T]:
        return cls(value=value)

    @classmethod
    def failed(cls, error: AggregationError) -> FetchResult[T]:
        return cls(error=error)


async def _count_bucket(source: RemoteSource, bucket: Bucket) -> FetchResult[float]:
    try:
        count = await source.count_in_range(bucket.start, bucket.end)
    except Exception as exc:
        error = BucketFetchError(bucket, exc)
        log.warning(
            "Event count failed for bucket",
            bucket_start=bucket.start.isoformat(),
            bucket_end=bucket.end.isoformat(),
            reason=str(exc),
        )
        return FetchResult.failed(error)
    return FetchResult.ok(count)


def event_point(bucket: Bucket, result: FetchResult[float]) -> DataPoint:
    """Turn one bucket's outcome into a chart point.

    Counted buckets are stamped in milliseconds. Failed or empty buckets
    become ``y=0`` stamped in whole seconds, the unit the events chart has
    always used for placeholders.
    """
    seconds = epoch_seconds(bucket.start)
    if not result.succeeded or result.value is None:
        return DataPoint(t=seconds, y=0)
    return DataPoint(t=seconds * 1000, y=result.value)


async def fetch_event_counts(
    source: RemoteSource,
    buckets: Sequence[Bucket],
) -> tuple[list[DataPoint], bool]:
    """Count events in every bucket concurrently.

    Parameters
    ----------
    source
        Remote source to query
    buckets
        Buckets from ``partition``

    Returns
    -------
    tuple[list[DataPoint], bool]
        One point per bucket in bucket order, and whether any bucket failed
    """
    results = await asyncio.gather(*(_count_bucket(source, bucket) for bucket in buckets))
    points = [event_point(bucket, result) for bucket, result in zip(buckets, results)]
    return points, any(not result.succeeded for result in results)


def _parse_value(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def alert_points(response: dict[str, Any]) -> list[DataPoint]:
    """Flatten a Prometheus range response into points ordered by time.

    Every ``[timestamp_seconds, "value"]`` pair of every result series is
    kept. A result without ``values`` adds nothing. Values that are not
    numbers come through as NaN.

    Raises
    ------
    RangeFetchError
        If the response has no ``data.result`` list or a malformed pair
    """
    try:
        results = response["data"]["result"]
    except (KeyError, TypeError) as exc:
        raise RangeFetchError("Range query response has no data.result", exc) from exc

    if not isinstance(results, list):
        raise RangeFetchError(f"Range query data.result is {type(results).__name__}, expected list")

    points = []
    try:
        for result in results:
            for pair in result.get("values") or []:
                points.append(DataPoint(t=int(float(pair[0])) * 1000, y=_parse_value(pair[1])))
    except (AttributeError, IndexError, KeyError, TypeError, ValueError) as exc:
        raise RangeFetchError(f"Malformed range query result: {exc}", exc) from exc

    points.sort(key=lambda point: point.t)
    return points


async def fetch_alerts(
    source: RemoteSource,
    interval: TimeInterval,
    granularity: Granularity,
    query: str = ALERTS_QUERY,
) -> FetchResult[list[DataPoint]]:
    """Run the alerts range query over the whole interval."""
    try:
        response = await source.query_range(interval.start, interval.end, granularity.step_string(), query)
        points = alert_points(response)
    except RangeFetchError as exc:
        log.error("Alerts range query returned an unusable response", reason=str(exc.cause or exc))
        return FetchResult.failed(exc)
    except Exception as exc:
        log.error("Alerts range query failed", reason=str(exc), query=query)
        return FetchResult.failed(RangeFetchError(f"Range query failed: {exc}", exc))
    return FetchResult.ok(points)


async def aggregate(
    interval: TimeInterval,
    source: RemoteSource,
    on_error: Callable[[str], Any] | None = None,
    *,
    trace_id: str | None = None,
) -> tuple[Series, Series]:
    """Build the alerts and events series for ``interval``.

    Buckets are half-open: a 2 hour range at 15 minutes is counted in 8
    buckets, the last one starting at 1:45. The legacy events chart also
    counted a ninth bucket starting exactly at the range end; that layout
    is ``partition(..., inclusive_end=True)`` and is not used here.

    Parameters
    ----------
    interval
        Range to chart
    source
        Remote source for event counts and the alerts query
    on_error
        Called once with ``ERROR_MESSAGE`` if anything failed
    trace_id
        Trace ID for log correlation

    Returns
    -------
    tuple[Series, Series]
        ``(alerts, events)``; both empty if the alerts query failed
    """
    granularity = select_step(interval.start, interval.end)
    buckets = partition(interval, granularity)

    with timing_context(
        "aggregate",
        component="aggregator",
        trace_id=trace_id,
        buckets=len(buckets),
        step=granularity.step_string(),
    ) as ctx:
        (event_pts, events_failed), alerts = await asyncio.gather(
            fetch_event_counts(source, buckets),
            fetch_alerts(source, interval, granularity),
        )
        ctx["events_failed"] = events_failed
        ctx["alerts_failed"] = not alerts.succeeded

    if not alerts.succeeded:
        _notify(on_error)
        return alerts_series(), events_series()

    if events_failed:
        _notify(on_error)

    return alerts_series(alerts.value), events_series(event_pts)


def _notify(on_error: Callable[[str], Any] | None) -> None:
    if on_error is not None:
        on_error(ERROR_MESSAGE)
