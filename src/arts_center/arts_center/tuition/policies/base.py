from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from fractions import Fraction
from typing import Sequence

# Disjoint, sorted (start, end) date pairs, inclusive, already clipped to the month.
Intervals = Sequence[tuple[date, date]]


class ProrationPolicy(ABC):
    """Strategy Pattern: how much of a monthly fee a partial month owes.

    A fully covered month must always yield 1; no coverage yields 0.
    """

    @abstractmethod
    def billable_fraction(self, *, intervals: Intervals, month_start: date, month_end: date) -> Fraction:
        raise NotImplementedError
