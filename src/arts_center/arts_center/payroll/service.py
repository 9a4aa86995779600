from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..attendance.model import AttendanceFilters
from ..attendance.service import AttendanceLedger
from ..classes.repository import ClassRepository
from ..common.datetime_utils import month_bounds
from ..common.validators import require_month
from ..core.enums import PersonType
from ..finance.expense_classifier import salary_expense_reason
from ..finance.repository import ExpenseRepository
from ..people.repository import PersonRepository
from .calculator.base import SalaryCalculator
from .calculator.per_session_calculator import PerSessionSalaryCalculator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SalaryLine:
    class_id: int
    class_name: str
    sessions: int
    salary_per_session: int
    total: int


class TeacherSalaryService:
    """Lương giáo viên theo tháng, tính từ số buổi có mặt (điểm danh giáo viên)."""

    def __init__(
        self,
        classes: ClassRepository,
        ledger: AttendanceLedger,
        *,
        people: Optional[PersonRepository] = None,
        expenses: Optional[ExpenseRepository] = None,
        calculator: Optional[SalaryCalculator] = None,
    ):
        self._classes = classes
        self._ledger = ledger
        self._people = people
        self._expenses = expenses
        self._calculator = calculator or PerSessionSalaryCalculator()

    def salary_details(self, teacher_id: int, month: int, year: int) -> list[SalaryLine]:
        month, year = require_month(month, year)
        start, end = month_bounds(month, year)

        lines: list[SalaryLine] = []
        for class_id in self._classes.list_class_ids_for_teacher(int(teacher_id)):
            schedule = self._classes.get_by_id(class_id)
            if not schedule:
                continue
            rows = self._ledger.list_by_date_range(
                start,
                end,
                AttendanceFilters(
                    class_id=class_id,
                    person_id=int(teacher_id),
                    person_type=PersonType.TEACHER,
                    present=True,
                ),
            )
            # Each (date, period) is one session.
            sessions = len({(r.attendance_date, r.period) for r in rows})
            lines.append(
                SalaryLine(
                    class_id=class_id,
                    class_name=schedule.name,
                    sessions=sessions,
                    salary_per_session=schedule.salary_per_session,
                    total=self._calculator.salary_for(schedule, sessions),
                )
            )

        lines.sort(key=lambda x: x.class_name)
        return lines

    def salary_for_month(self, teacher_id: int, month: int, year: int) -> int:
        return sum(line.total for line in self.salary_details(teacher_id, month, year))

    def all_teachers(self, month: int, year: int) -> list[dict]:
        if self._people is None:
            return []
        summary = []
        for t in self._people.list_all(PersonType.TEACHER, active_only=True):
            details = self.salary_details(t.person_id, month, year)
            summary.append(
                {
                    "teacher_id": t.person_id,
                    "full_name": t.full_name,
                    "phone": t.phone,
                    "sessions": sum(d.sessions for d in details),
                    "total_salary": sum(d.total for d in details),
                }
            )
        summary.sort(key=lambda x: x["total_salary"], reverse=True)
        return summary

    def sync_salary_expense(self, month: int, year: int) -> int:
        """Ghi tổng lương tháng vào chi phí với lý do "Lương T<m>/<yyyy>".

        Re-running replaces the amount at the same reason/month/year.
        """

        if self._expenses is None:
            raise RuntimeError("Expense repository is not configured")
        month, year = require_month(month, year)
        total = sum(t["total_salary"] for t in self.all_teachers(month, year))
        reason = salary_expense_reason(month, year)
        expense_id = self._expenses.upsert_by_reason(reason=reason, amount=total, month=month, year=year)
        logger.info("synced %s = %s (expense %s)", reason, total, expense_id)
        return expense_id
