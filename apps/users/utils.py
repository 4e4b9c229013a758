from __future__ import annotations

from datetime import datetime, timezone as dt_timezone

from django.conf import settings
from django.utils import timezone


def _whole_years_between(earlier: datetime, later: datetime) -> int:
    years = later.year - earlier.year
    if (later.month, later.day, later.time()) < (earlier.month, earlier.day, earlier.time()):
        years -= 1
    return years


def compute_age(birth_at: datetime | None, *, now: datetime | None = None) -> int:
    """
    Whole years elapsed since ``birth_at``.

    Returns 0 when the birth instant is unknown; callers treat 0 as "unknown", not
    as an age. Known permissiveness: any computed value below MIN_REPORTED_AGE
    (including future birth instants, measured as distance from now) is reported
    as MIN_REPORTED_AGE rather than rejected.
    """
    if birth_at is None:
        return 0
    current = now or timezone.now()
    if timezone.is_naive(birth_at):
        birth_at = timezone.make_aware(birth_at, dt_timezone.utc)
    if timezone.is_naive(current):
        current = timezone.make_aware(current, dt_timezone.utc)
    birth_utc = birth_at.astimezone(dt_timezone.utc)
    current_utc = current.astimezone(dt_timezone.utc)
    if birth_utc <= current_utc:
        years = _whole_years_between(birth_utc, current_utc)
    else:
        years = _whole_years_between(current_utc, birth_utc)
    return max(getattr(settings, "MIN_REPORTED_AGE", 18), years)
