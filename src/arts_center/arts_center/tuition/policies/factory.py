from __future__ import annotations

from dataclasses import dataclass

from ...core.constants import DEFAULT_PRORATION_CUTOFF_DAY
from ...core.enums import ProrationMode
from ...core.exceptions import ValidationError
from .base import ProrationPolicy
from .cutoff_day import CutoffDayPolicy
from .full_month import FullMonthPolicy
from .linear import LinearProrationPolicy


@dataclass
class ProrationPolicyFactory:
    """Factory Pattern: build the configured pro-ration policy."""

    cutoff_day: int = DEFAULT_PRORATION_CUTOFF_DAY

    def for_mode(self, mode: ProrationMode | str) -> ProrationPolicy:
        try:
            mode = ProrationMode(mode)
        except ValueError:
            raise ValidationError(f"Chính sách tính học phí không hợp lệ: {mode!r}")

        if mode == ProrationMode.FULL_MONTH:
            return FullMonthPolicy()
        if mode == ProrationMode.LINEAR:
            return LinearProrationPolicy()
        return CutoffDayPolicy(self.cutoff_day)
