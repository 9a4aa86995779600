from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Expense


class ExpenseRepository(Protocol):
    def list_for_year(self, year: int) -> Sequence[Expense]:
        raise NotImplementedError

    def list_for_month(self, month: int, year: int) -> Sequence[Expense]:
        raise NotImplementedError

    def find_by_reason(self, *, reason: str, month: int, year: int) -> Optional[Expense]:
        raise NotImplementedError

    def upsert_by_reason(self, *, reason: str, amount: int, month: int, year: int) -> int:
        """Create, or replace the amount of, the expense with this reason in month/year.

        Returns expense_id.
        """

        raise NotImplementedError
