from __future__ import annotations

from datetime import date
from fractions import Fraction

from .base import Intervals, ProrationPolicy


class LinearProrationPolicy(ProrationPolicy):
    """Bill covered days / days in month; gaps between intervals are not billed."""

    def billable_fraction(self, *, intervals: Intervals, month_start: date, month_end: date) -> Fraction:
        covered = sum((end - start).days + 1 for start, end in intervals if start <= end)
        total = (month_end - month_start).days + 1
        return Fraction(min(covered, total), total)
