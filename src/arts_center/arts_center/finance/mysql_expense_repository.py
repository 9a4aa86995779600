from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, db_cursor, fetchall, fetchone
from .model import Expense
from .repository import ExpenseRepository

_COLUMNS = "expense_id, reason, amount, month, year, expense_date"


def _row_to_expense(r: dict) -> Expense:
    return Expense(
        expense_id=int(r["expense_id"]),
        reason=r["reason"],
        amount=int(r.get("amount") or 0),
        month=int(r["month"]),
        year=int(r["year"]),
        expense_date=as_date(r.get("expense_date")),
    )


class MySQLExpenseRepository(ExpenseRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_year(self, year: int) -> Sequence[Expense]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM expenses WHERE year=%s ORDER BY month ASC, expense_id ASC", (int(year),))
            return [_row_to_expense(r) for r in fetchall(cur)]

    def list_for_month(self, month: int, year: int) -> Sequence[Expense]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM expenses WHERE month=%s AND year=%s ORDER BY expense_id ASC",
                (int(month), int(year)),
            )
            return [_row_to_expense(r) for r in fetchall(cur)]

    def find_by_reason(self, *, reason: str, month: int, year: int) -> Optional[Expense]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM expenses WHERE reason=%s AND month=%s AND year=%s",
                (reason, int(month), int(year)),
            )
            r = fetchone(cur)
            return _row_to_expense(r) if r else None

    def upsert_by_reason(self, *, reason: str, amount: int, month: int, year: int) -> int:
        existing = self.find_by_reason(reason=reason, month=month, year=year)
        with db_cursor(self._conn_factory) as (_, cur):
            if existing:
                cur.execute("UPDATE expenses SET amount=%s WHERE expense_id=%s", (int(amount), existing.expense_id))
                return existing.expense_id

            cur.execute(
                """
                INSERT INTO expenses(reason, amount, month, year, expense_date)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (reason, int(amount), int(month), int(year), date(int(year), int(month), 1)),
            )
            return int(cur.lastrowid)
