"""Tests for interval partitioning."""

import math
from datetime import datetime, timedelta, timezone

import pytest

from alertchart.charts.buckets import TimeInterval, partition
from alertchart.charts.steps import Granularity, TimeUnit

START = datetime(2025, 10, 8, 12, 0, tzinfo=timezone.utc)
QUARTER = Granularity(15, TimeUnit.MINUTE)


def test_two_hours_at_fifteen_minutes_yields_eight_buckets():
    """12:00 -> 14:00 in 15 minute steps."""
    buckets = partition(TimeInterval(START, START + timedelta(hours=2)), QUARTER)

    assert len(buckets) == 8
    assert buckets[0].start == START
    assert buckets[-1].end == START + timedelta(hours=2)


def test_buckets_are_contiguous_and_ordered():
    """Each bucket starts where the previous one ended."""
    buckets = partition(TimeInterval(START, START + timedelta(minutes=100)), QUARTER)

    for previous, current in zip(buckets, buckets[1:]):
        assert previous.end == current.start
        assert previous.start < current.start
    for bucket in buckets:
        assert bucket.end - bucket.start == timedelta(minutes=15)


def test_last_bucket_overshoots_by_less_than_one_step():
    """A range that is not a whole number of steps ends inside the last bucket."""
    end = START + timedelta(minutes=100)
    buckets = partition(TimeInterval(START, end), QUARTER)

    assert len(buckets) == 7
    assert buckets[-1].start < end < buckets[-1].end
    assert buckets[-1].end - end < QUARTER.as_timedelta()


def test_zero_length_interval_yields_one_bucket():
    """Even an empty range is charted with a single bucket."""
    buckets = partition(TimeInterval(START, START), QUARTER)

    assert len(buckets) == 1
    assert buckets[0].start == START
    assert buckets[0].end == START + timedelta(minutes=15)


def test_inclusive_end_adds_bucket_starting_at_end():
    """inclusive_end keeps the bucket whose start equals the range end."""
    end = START + timedelta(hours=2)
    buckets = partition(TimeInterval(START, end), QUARTER, inclusive_end=True)

    assert len(buckets) == 9
    assert buckets[-1].start == end


def test_inclusive_end_zero_length_still_one_bucket():
    """inclusive_end does not double the single bucket of an empty range."""
    assert len(partition(TimeInterval(START, START), QUARTER, inclusive_end=True)) == 1


@pytest.mark.parametrize("minutes", [0, 1, 14, 15, 16, 59, 60, 61, 390])
def test_bucket_count_bound(minutes):
    """Never more than ceil(duration / step) + 1 buckets, never fewer than one."""
    interval = TimeInterval(START, START + timedelta(minutes=minutes))
    bound = math.ceil(minutes / 15) + 1

    for inclusive in (False, True):
        buckets = partition(interval, QUARTER, inclusive_end=inclusive)
        assert 1 <= len(buckets) <= bound
        assert buckets[0].start == START
        assert buckets[-1].end >= interval.end


def test_partition_returns_immutable_tuple():
    """Result is a tuple of frozen intervals."""
    buckets = partition(TimeInterval(START, START + timedelta(hours=1)), QUARTER)

    assert isinstance(buckets, tuple)
    with pytest.raises(AttributeError):
        buckets[0].start = START  # type: ignore[misc]


class TestTimeInterval:
    """Tests for TimeInterval validation."""

    def test_rejects_start_after_end(self):
        """start must not be after end."""
        with pytest.raises(ValueError):
            TimeInterval(START, START - timedelta(seconds=1))

    def test_naive_datetimes_are_utc(self):
        """Naive values are taken as UTC."""
        interval = TimeInterval(datetime(2025, 10, 8, 12, 0), datetime(2025, 10, 8, 13, 0))
        assert interval.start == START
        assert interval.start.tzinfo is not None

    def test_offsets_are_converted_to_utc(self):
        """Aware values with an offset are normalized."""
        plus_two = timezone(timedelta(hours=2))
        interval = TimeInterval(datetime(2025, 10, 8, 14, 0, tzinfo=plus_two), datetime(2025, 10, 8, 15, 0, tzinfo=plus_two))
        assert interval.start == START
        assert interval.start.utcoffset() == timedelta(0)
