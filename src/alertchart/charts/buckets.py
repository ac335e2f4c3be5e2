"""Partition a time range into fixed-size buckets.

Each bucket becomes one event-count request. Buckets are contiguous and in
chronological order:

    interval = 12:00 -> 14:00, granularity = 15m

    Bucket 1: 12:00 -> 12:15
    Bucket 2: 12:15 -> 12:30
    ...
    Bucket 8: 13:45 -> 14:00

The last bucket may end after the interval when the range is not a multiple
of the granularity.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..core.time import ensure_utc
from .steps import Granularity

__all__ = [
    "Bucket",
    "TimeInterval",
    "partition",
]


@dataclass(frozen=True)
class TimeInterval:
    """Half-open ``[start, end)`` range in UTC.

    Attributes
    ----------
    start : datetime
        Inclusive start (naive values are taken as UTC)
    end : datetime
        Exclusive end, never before ``start``
    """

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        object.__setattr__(self, "start", ensure_utc(self.start))
        object.__setattr__(self, "end", ensure_utc(self.end))
        if self.start > self.end:
            raise ValueError(f"Interval start {self.start.isoformat()} is after end {self.end.isoformat()}")


# A bucket is just the sub-interval one count request covers.
Bucket = TimeInterval


def partition(
    interval: TimeInterval,
    granularity: Granularity,
    *,
    inclusive_end: bool = False,
) -> tuple[Bucket, ...]:
    """Split ``interval`` into consecutive buckets of ``granularity``.

    Parameters
    ----------
    interval
        Range to split
    granularity
        Size of every bucket
    inclusive_end
        Also emit a bucket starting exactly at ``interval.end`` when the
        range is a whole number of steps

    Returns
    -------
    tuple[Bucket, ...]
        At least one bucket; a zero-length interval yields exactly one
    """
    step = granularity.as_timedelta()
    buckets = []
    cursor = interval.start

    while cursor < interval.end or (inclusive_end and cursor == interval.end):
        buckets.append(Bucket(cursor, cursor + step))
        cursor += step

    if not buckets:
        buckets.append(Bucket(interval.start, interval.start + step))

    return tuple(buckets)
