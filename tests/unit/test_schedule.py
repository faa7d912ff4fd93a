from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from index_timeseries.schedule import day_offsets, target_time

EXPECTED_DEFAULT_OFFSETS = [1, 5, 9, 13, 17, 21, 25, 29, 33, 37, 41, 45, 49, 53, 57, 61, 65, 69]


def test_default_offsets_are_exact_sequence():
    offsets = list(day_offsets())

    assert offsets == EXPECTED_DEFAULT_OFFSETS
    assert len(offsets) == 18
    assert all(b - a == 4 for a, b in zip(offsets, offsets[1:]))
    assert all(offset < 70 for offset in offsets)


def test_offsets_stop_is_exclusive():
    assert list(day_offsets(1, 9, 4)) == [1, 5]
    assert list(day_offsets(1, 10, 4)) == [1, 5, 9]


def test_empty_range_yields_nothing():
    assert list(day_offsets(70, 70, 4)) == []
    assert list(day_offsets(80, 70, 4)) == []


@pytest.mark.parametrize("step", [0, -4])
def test_non_positive_step_is_rejected(step: int):
    with pytest.raises(ValueError, match="step must be positive"):
        list(day_offsets(1, 70, step))


def test_target_time_subtracts_whole_days(fixed_now: datetime):
    assert target_time(9, fixed_now) == fixed_now - timedelta(days=9)


def test_target_time_treats_naive_now_as_utc():
    naive = datetime(2024, 11, 27, 0, 0, 0)

    result = target_time(1, naive)

    assert result.tzinfo is timezone.utc
    assert result == datetime(2024, 11, 26, 0, 0, 0, tzinfo=timezone.utc)
