"""Event and alert chart datasets.

Splits a time range into buckets, fetches per-bucket event counts and an
alerts range query concurrently, and merges them into chart series.
"""

from .aggregator import (
    ALERTS_QUERY,
    ERROR_MESSAGE,
    AggregationError,
    BucketFetchError,
    FetchResult,
    RangeFetchError,
    aggregate,
    alert_points,
    event_point,
    fetch_alerts,
    fetch_event_counts,
)
from .buckets import Bucket, TimeInterval, partition
from .series import DataPoint, Series, alerts_series, events_series
from .steps import Granularity, TimeUnit, select_step, step_string

__all__ = [
    # Steps
    "Granularity",
    "TimeUnit",
    "select_step",
    "step_string",
    # Buckets
    "Bucket",
    "TimeInterval",
    "partition",
    # Series
    "DataPoint",
    "Series",
    "alerts_series",
    "events_series",
    # Aggregation
    "ALERTS_QUERY",
    "ERROR_MESSAGE",
    "AggregationError",
    "BucketFetchError",
    "RangeFetchError",
    "FetchResult",
    "aggregate",
    "alert_points",
    "event_point",
    "fetch_alerts",
    "fetch_event_counts",
]
