from __future__ import annotations

import re
import unicodedata
from typing import Iterable, Optional

from ..core.constants import SALARY_MARKER, SALARY_REASON_TEMPLATE
from .model import Expense

# "T1/2024", "T12/2023": mã tháng/năm trong lý do chi
_MONTH_CODE = re.compile(r"T(\d{1,2})/(\d{4})")


def _fold(text: str) -> str:
    return unicodedata.normalize("NFC", text or "").casefold()


def is_teacher_salary_expense(reason: str) -> bool:
    """Lương giáo viên: lý do chứa "lương" và một mã tháng dạng T<m>/<yyyy>."""

    return SALARY_MARKER in _fold(reason) and parse_month_code(reason) is not None


def parse_month_code(reason: str) -> Optional[tuple[int, int]]:
    m = _MONTH_CODE.search(unicodedata.normalize("NFC", reason or ""))
    if not m:
        return None
    month, year = int(m.group(1)), int(m.group(2))
    if not 1 <= month <= 12:
        return None
    return month, year


def salary_expense_reason(month: int, year: int) -> str:
    return SALARY_REASON_TEMPLATE.format(month=int(month), year=int(year))


def split_expenses(expenses: Iterable[Expense]) -> tuple[list[Expense], list[Expense]]:
    """Return (teacher_salary, other)."""

    salary: list[Expense] = []
    other: list[Expense] = []
    for e in expenses:
        (salary if is_teacher_salary_expense(e.reason) else other).append(e)
    return salary, other
