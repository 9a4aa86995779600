from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta
from typing import Iterable, Iterator, Optional

from ..core.constants import AFTERNOON_START_HOUR, EVENING_START_HOUR
from ..core.enums import TimePeriod
from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime((value or "").strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Ngày không hợp lệ (YYYY-MM-DD): {value!r}")


def parse_iso_datetime(value: str) -> datetime:
    """Parse `YYYY-MM-DD HH:MM:SS` (or with a `T` separator) into datetime."""
    try:
        return datetime.fromisoformat((value or "").strip())
    except ValueError:
        raise ValidationError(f"Thời điểm không hợp lệ: {value!r}")


def parse_hhmm(value: str) -> time:
    try:
        return datetime.strptime((value or "").strip(), "%H:%M").time()
    except ValueError:
        raise ValidationError(f"Giờ không hợp lệ (HH:MM): {value!r}")


def domain_weekday(d: date) -> int:
    """Day of week with Sunday=0 ... Saturday=6.

    `date.weekday()` is Monday=0, so shift by one.
    """
    return (d.weekday() + 1) % 7


def iter_dates(start: date, end: date) -> Iterator[date]:
    """Inclusive on both ends; empty when start > end."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def month_bounds(month: int, year: int) -> tuple[date, date]:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def period_for_start_time(start: time) -> TimePeriod:
    if start.hour < AFTERNOON_START_HOUR:
        return TimePeriod.MORNING
    if start.hour < EVENING_START_HOUR:
        return TimePeriod.AFTERNOON
    return TimePeriod.EVENING


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def merge_intervals(
    intervals: Iterable[tuple[date, Optional[date]]], lower: date, upper: date
) -> list[tuple[date, date]]:
    """Clip inclusive intervals to [lower, upper], then merge overlapping or adjacent ones.

    An open end (None) runs to `upper`. Result is sorted and disjoint.
    """

    clipped = sorted(
        (max(start, lower), min(end or upper, upper))
        for start, end in intervals
        if start <= upper and (end is None or end >= lower)
    )
    merged: list[tuple[date, date]] = []
    for start, end in clipped:
        if start > end:
            continue
        if merged and start <= merged[-1][1] + timedelta(days=1):
            merged[-1] = (merged[-1][0], max(merged[-1][1], end))
        else:
            merged.append((start, end))
    return merged
