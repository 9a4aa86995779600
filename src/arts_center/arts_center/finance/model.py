from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class Expense:
    """Khoản chi đã ghi nhận; không sửa sau khi tạo."""

    expense_id: int
    reason: str
    amount: int
    month: int
    year: int
    expense_date: Optional[date] = None


@dataclass(frozen=True)
class MonthlyFinance:
    month: int
    year: int
    revenue: int = 0
    salary_expenses: int = 0
    other_expenses: int = 0

    @property
    def expenses(self) -> int:
        return self.salary_expenses + self.other_expenses

    @property
    def profit(self) -> int:
        # Always derived, never stored.
        return self.revenue - self.expenses

    @property
    def label(self) -> str:
        return f"{self.month}/{self.year}"

    def as_dict(self) -> dict:
        return {
            "month": self.month,
            "year": self.year,
            "label": self.label,
            "revenue": self.revenue,
            "expenses": self.expenses,
            "salary_expenses": self.salary_expenses,
            "other_expenses": self.other_expenses,
            "profit": self.profit,
        }


@dataclass(frozen=True)
class ClassRevenueItem:
    class_id: int
    class_name: str
    subject: str
    month: int
    year: int
    total_students: int
    expected_revenue: int
    paid_count: int = 0
    unpaid_count: int = 0
    paid_revenue: int = 0

    def as_dict(self) -> dict:
        return {
            "class_id": self.class_id,
            "class_name": self.class_name,
            "subject": self.subject,
            "month": self.month,
            "year": self.year,
            "total_students": self.total_students,
            "expected_revenue": self.expected_revenue,
            "paid_count": self.paid_count,
            "unpaid_count": self.unpaid_count,
            "paid_revenue": self.paid_revenue,
        }
