"""Step (granularity) selection for dashboard charts.

Maps a time range to the bucket size used both to partition event counts
and as the ``step`` of the alerts range query. Wider ranges get coarser
steps so a chart stays readable.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum

__all__ = [
    "Granularity",
    "TimeUnit",
    "select_step",
    "step_string",
]


class TimeUnit(str, Enum):
    """Units a granularity can be expressed in."""

    SECOND = "second"
    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"


_UNIT_SECONDS = {
    TimeUnit.SECOND: 1,
    TimeUnit.MINUTE: 60,
    TimeUnit.HOUR: 3600,
    TimeUnit.DAY: 86400,
}

_UNIT_SUFFIX = {
    TimeUnit.SECOND: "s",
    TimeUnit.MINUTE: "m",
    TimeUnit.HOUR: "h",
    TimeUnit.DAY: "d",
}


@dataclass(frozen=True)
class Granularity:
    """Bucket size, e.g. ``Granularity(15, TimeUnit.MINUTE)``."""

    amount: int
    unit: TimeUnit

    def __post_init__(self) -> None:
        if self.amount <= 0:
            raise ValueError(f"Granularity amount must be positive, got {self.amount}")
        object.__setattr__(self, "unit", TimeUnit(self.unit))

    def as_timedelta(self) -> timedelta:
        return timedelta(seconds=self.amount * _UNIT_SECONDS[self.unit])

    def step_string(self) -> str:
        return step_string(self.amount, self.unit)

    def __str__(self) -> str:
        return self.step_string()


def step_string(amount: int, unit: TimeUnit | str) -> str:
    """Encode a granularity as a range-query step.

    Examples
    --------
    >>> step_string(15, "minute")
    '15m'
    >>> step_string(2, TimeUnit.HOUR)
    '2h'

    Unknown units are encoded in seconds.
    """
    try:
        suffix = _UNIT_SUFFIX[TimeUnit(unit)]
    except ValueError:
        suffix = "s"
    return f"{amount}{suffix}"


# (upper bound on range duration, granularity) checked in order
_STEP_TABLE: tuple[tuple[timedelta, Granularity], ...] = (
    (timedelta(minutes=60.5), Granularity(5, TimeUnit.MINUTE)),
    (timedelta(hours=6.5), Granularity(15, TimeUnit.MINUTE)),
    (timedelta(hours=12.5), Granularity(1, TimeUnit.HOUR)),
    (timedelta(hours=24.5), Granularity(2, TimeUnit.HOUR)),
    (timedelta(days=3.5), Granularity(6, TimeUnit.HOUR)),
    (timedelta(days=7.5), Granularity(12, TimeUnit.HOUR)),
)
_WIDEST_STEP = Granularity(24, TimeUnit.HOUR)


def select_step(start: datetime, end: datetime) -> Granularity:
    """Choose the granularity for ``[start, end]``.

    Parameters
    ----------
    start
        Range start
    end
        Range end (a zero-length range gets the finest step)

    Returns
    -------
    Granularity
        Always non-zero
    """
    duration = end - start
    for bound, granularity in _STEP_TABLE:
        if duration <= bound:
            return granularity
    return _WIDEST_STEP
