from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import PaymentStatus
from .repository import PaymentRepository

_COLUMNS = "payment_id, person_id, class_id, month, year, amount, is_paid, paid_at"


def _row_to_payment(r: dict) -> PaymentStatus:
    return PaymentStatus(
        payment_id=int(r["payment_id"]),
        person_id=int(r["person_id"]),
        class_id=int(r["class_id"]),
        month=int(r["month"]),
        year=int(r["year"]),
        is_paid=bool(r["is_paid"]),
        amount=int(r["amount"]) if r.get("amount") is not None else None,
        paid_at=r.get("paid_at"),
    )


class MySQLPaymentRepository(PaymentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, payment_id: int) -> Optional[PaymentStatus]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM payment_status WHERE payment_id=%s", (int(payment_id),))
            r = fetchone(cur)
            return _row_to_payment(r) if r else None

    def find(self, *, person_id: int, class_id: int, month: int, year: int) -> Optional[PaymentStatus]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM payment_status
                WHERE person_id=%s AND class_id=%s AND month=%s AND year=%s
                """,
                (int(person_id), int(class_id), int(month), int(year)),
            )
            r = fetchone(cur)
            return _row_to_payment(r) if r else None

    def list_for_month(self, month: int, year: int, *, class_id: Optional[int] = None) -> Sequence[PaymentStatus]:
        sql = f"SELECT {_COLUMNS} FROM payment_status WHERE month=%s AND year=%s"
        params: list[object] = [int(month), int(year)]
        if class_id is not None:
            sql += " AND class_id=%s"
            params.append(int(class_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql + " ORDER BY class_id ASC, person_id ASC", tuple(params))
            return [_row_to_payment(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        person_id: int,
        class_id: int,
        month: int,
        year: int,
        is_paid: bool,
        amount: Optional[int],
        paid_at: Optional[datetime],
    ) -> int:
        # The unique key rejects a second row for the same student/class/month.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO payment_status(person_id, class_id, month, year, amount, is_paid, paid_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (int(person_id), int(class_id), int(month), int(year), amount, 1 if is_paid else 0, paid_at),
            )
            return int(cur.lastrowid)

    def update(
        self, payment_id: int, *, is_paid: bool, amount: Optional[int], paid_at: Optional[datetime]
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE payment_status SET is_paid=%s, amount=%s, paid_at=%s WHERE payment_id=%s",
                (1 if is_paid else 0, amount, paid_at, int(payment_id)),
            )
            return cur.rowcount > 0
