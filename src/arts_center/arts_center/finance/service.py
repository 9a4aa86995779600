from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date
from typing import Optional

from ..classes.repository import ClassRepository
from ..common.datetime_utils import month_bounds
from ..common.validators import require_month, require_subject
from ..core.enums import PersonType
from ..enrollments.model import BILLABLE_STATUSES, Enrollment
from ..enrollments.repository import EnrollmentRepository
from ..payments.repository import PaymentRepository
from ..tuition.model import FeeSchedule
from ..tuition.service import FeeEngine
from .expense_classifier import split_expenses
from .model import ClassRevenueItem, MonthlyFinance
from .repository import ExpenseRepository

logger = logging.getLogger(__name__)


class FinancialAggregator:
    """Monthly revenue / expenses / profit rollups for reporting."""

    def __init__(
        self,
        classes: ClassRepository,
        enrollments: EnrollmentRepository,
        expenses: ExpenseRepository,
        fee_engine: FeeEngine,
        *,
        payments: Optional[PaymentRepository] = None,
    ):
        self._classes = classes
        self._enrollments = enrollments
        self._expenses = expenses
        self._fee_engine = fee_engine
        self._payments = payments

    def _billable_rows(self, start: date, end: date, class_id: Optional[int] = None) -> list[Enrollment]:
        rows = self._enrollments.list_overlapping(
            start=start,
            end=end,
            person_type=PersonType.STUDENT,
            statuses=BILLABLE_STATUSES,
            class_id=class_id,
        )
        return [r for r in rows if r.is_attending]

    def build_monthly_series(self, year: int, *, fee_schedule: FeeSchedule) -> list[MonthlyFinance]:
        """12 entries (Jan..Dec), zero-filled; profit = revenue - expenses."""

        _, year = require_month(1, year)
        classes = {c.class_id: c for c in self._classes.list_all()}
        rows = self._billable_rows(date(year, 1, 1), date(year, 12, 31))

        in_use = {classes[r.class_id] for r in rows if r.class_id in classes}
        self._fee_engine.audit_fee_schedule(fee_schedule, sorted(in_use, key=lambda c: c.class_id))

        expenses_by_month: dict[int, list] = defaultdict(list)
        for e in self._expenses.list_for_year(year):
            if e.year == year and 1 <= e.month <= 12:
                expenses_by_month[e.month].append(e)

        series: list[MonthlyFinance] = []
        for month in range(1, 13):
            billed = self._fee_engine.bill_month(classes, rows, month, year, fee_schedule=fee_schedule)
            salary, other = split_expenses(expenses_by_month.get(month, []))
            series.append(
                MonthlyFinance(
                    month=month,
                    year=year,
                    revenue=sum(sum(amounts.values()) for amounts in billed.values()),
                    salary_expenses=sum(e.amount for e in salary),
                    other_expenses=sum(e.amount for e in other),
                )
            )
        return series

    def class_revenue(
        self,
        month: int,
        year: int,
        *,
        fee_schedule: FeeSchedule,
        subject: Optional[str] = None,
    ) -> list[ClassRevenueItem]:
        """Expected revenue per active class running in the month, with payment counts."""

        month, year = require_month(month, year)
        subject = require_subject(subject) if subject else None
        month_start, month_end = month_bounds(month, year)

        classes = {
            c.class_id: c
            for c in self._classes.list_all(active_only=True)
            if (c.start_date is None or c.start_date <= month_end)
            and (c.end_date is None or c.end_date >= month_start)
            and (subject is None or c.subject == subject)
        }
        if not classes:
            return []

        self._fee_engine.audit_fee_schedule(fee_schedule, list(classes.values()))
        rows = [r for r in self._billable_rows(month_start, month_end) if r.class_id in classes]
        billed = self._fee_engine.bill_month(classes, rows, month, year, fee_schedule=fee_schedule)

        # class_id -> {person_id: collected amount}
        paid: dict[int, dict[int, int]] = defaultdict(dict)
        if self._payments is not None:
            for p in self._payments.list_for_month(month, year):
                due = billed.get(p.class_id, {})
                if p.is_paid and p.person_id in due:
                    paid[p.class_id][p.person_id] = p.amount if p.amount is not None else due[p.person_id]

        items = []
        for c in classes.values():
            students = billed.get(c.class_id, {})
            collected = paid.get(c.class_id, {})
            items.append(
                ClassRevenueItem(
                    class_id=c.class_id,
                    class_name=c.name,
                    subject=c.subject,
                    month=month,
                    year=year,
                    total_students=len(students),
                    expected_revenue=sum(students.values()),
                    paid_count=len(collected),
                    unpaid_count=len(students) - len(collected),
                    paid_revenue=sum(collected.values()),
                )
            )
        items.sort(key=lambda i: i.class_name)
        return items


def summarize(series: list[MonthlyFinance]) -> dict:
    revenue = sum(m.revenue for m in series)
    expenses = sum(m.expenses for m in series)
    return {"revenue": revenue, "expenses": expenses, "profit": revenue - expenses}
