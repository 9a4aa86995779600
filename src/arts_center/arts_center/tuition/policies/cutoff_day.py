from __future__ import annotations

from datetime import date
from fractions import Fraction

from ...core.constants import DEFAULT_PRORATION_CUTOFF_DAY
from ...core.exceptions import ValidationError
from .base import Intervals, ProrationPolicy


class CutoffDayPolicy(ProrationPolicy):
    """Full month or nothing, decided by a cutoff day.

    Joining on or before `cutoff_day` bills the month; joining later does not.
    Leaving before `cutoff_day` bills nothing; leaving on or after it bills the month.
    Only the first covered day and the last covered day are looked at.
    """

    def __init__(self, cutoff_day: int = DEFAULT_PRORATION_CUTOFF_DAY):
        if not 1 <= int(cutoff_day) <= 31:
            raise ValidationError(f"Ngày chốt học phí không hợp lệ: {cutoff_day}")
        self.cutoff_day = int(cutoff_day)

    def billable_fraction(self, *, intervals: Intervals, month_start: date, month_end: date) -> Fraction:
        if not intervals:
            return Fraction(0)
        first, last = intervals[0][0], intervals[-1][1]
        if first > last:
            return Fraction(0)
        if first > month_start and first.day > self.cutoff_day:
            return Fraction(0)
        if last < month_end and last.day < self.cutoff_day:
            return Fraction(0)
        return Fraction(1)
