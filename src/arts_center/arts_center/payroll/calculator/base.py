from __future__ import annotations

from abc import ABC, abstractmethod

from ...classes.model import ClassSchedule


class SalaryCalculator(ABC):
    """Calculator interface (Strategy Pattern for teacher payroll)."""

    @abstractmethod
    def salary_for(self, schedule: ClassSchedule, sessions_taught: int) -> int:
        raise NotImplementedError
