from __future__ import annotations

from .base import SalaryCalculator
from ...classes.model import ClassSchedule


class PerSessionSalaryCalculator(SalaryCalculator):
    """Standard rule: salary_per_session x sessions taught, not below 0."""

    def salary_for(self, schedule: ClassSchedule, sessions_taught: int) -> int:
        return max(int(schedule.salary_per_session or 0), 0) * max(int(sessions_taught), 0)
