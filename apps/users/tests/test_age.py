from __future__ import annotations

from datetime import datetime, timezone as dt_timezone

from django.test import override_settings

from apps.users.utils import compute_age

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=dt_timezone.utc)


def test_unknown_birth_is_zero():
    assert compute_age(None, now=NOW) == 0


def test_counts_whole_years():
    assert compute_age(datetime(1990, 6, 15, tzinfo=dt_timezone.utc), now=NOW) == 34
    assert compute_age(datetime(1990, 6, 16, tzinfo=dt_timezone.utc), now=NOW) == 33


def test_young_and_future_births_clamp_to_floor():
    assert compute_age(datetime(2015, 1, 1, tzinfo=dt_timezone.utc), now=NOW) == 18
    assert compute_age(datetime(2030, 1, 1, tzinfo=dt_timezone.utc), now=NOW) == 18


def test_naive_birth_is_read_as_utc():
    assert compute_age(datetime(1980, 1, 1), now=NOW) == 44


@override_settings(MIN_REPORTED_AGE=21)
def test_floor_comes_from_settings():
    assert compute_age(datetime(2005, 1, 1, tzinfo=dt_timezone.utc), now=NOW) == 21
