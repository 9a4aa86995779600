from __future__ import annotations

from datetime import date
from fractions import Fraction

from .base import Intervals, ProrationPolicy


class FullMonthPolicy(ProrationPolicy):
    """Any enrolled day in the month bills the whole month."""

    def billable_fraction(self, *, intervals: Intervals, month_start: date, month_end: date) -> Fraction:
        return Fraction(1) if intervals else Fraction(0)
