from __future__ import annotations

from datetime import datetime, time

import pytest

from src.onboarding_tracker.onboarding_tracker.analytics.bucketizer import bucket_index, bucket_label, buckets_per_day


@pytest.mark.parametrize("width, expected", [(15, 96), (30, 48), (45, 32), (60, 24)])
def test_buckets_per_day(width, expected):
    assert buckets_per_day(width) == expected


def test_same_hour_shares_hourly_bucket():
    assert bucket_index(time(9, 10), 60) == bucket_index(time(9, 50), 60) == 9
    assert bucket_label(9, 60) == "09:00"


def test_quarter_hour_buckets_split_the_hour():
    assert bucket_index(time(9, 10), 15) == 36
    assert bucket_index(time(9, 50), 15) == 39
    assert bucket_label(36, 15) == "09:00 - 09:15"
    assert bucket_label(39, 15) == "09:45 - 10:00"


def test_date_is_ignored():
    a = datetime(2026, 2, 1, 23, 59)
    b = datetime(2026, 3, 15, 23, 0)
    assert bucket_index(a, 60) == bucket_index(b, 60) == 23


def test_last_45_minute_bucket_ends_at_midnight():
    assert bucket_index(time(23, 59), 45) == 31
    assert bucket_label(31, 45) == "23:15 - 24:00"
