from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import PaymentState


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat(sep=" ", timespec="seconds") if value else None


@dataclass(frozen=True)
class PaymentStatus:
    """Thực thể miền (domain): Trạng thái đóng học phí của (học viên, lớp, tháng).

    `amount` là None nghĩa là thu đúng số học phí tính được cho tháng đó.
    """

    payment_id: int
    person_id: int
    class_id: int
    month: int
    year: int
    is_paid: bool = False
    amount: Optional[int] = None
    paid_at: Optional[datetime] = None

    @property
    def state(self) -> PaymentState:
        return PaymentState.PAID if self.is_paid else PaymentState.UNPAID

    def as_dict(self) -> dict:
        return {
            "payment_id": self.payment_id,
            "person_id": self.person_id,
            "class_id": self.class_id,
            "month": self.month,
            "year": self.year,
            "amount": self.amount,
            "is_paid": self.is_paid,
            "paid_at": _iso(self.paid_at),
        }


@dataclass(frozen=True)
class PaymentUpdate:
    """One entry of a bulk update; None fields are left unchanged."""

    payment_id: int
    is_paid: Optional[bool] = None
    amount: Optional[int] = None
    paid_at: Optional[datetime] = None


@dataclass(frozen=True)
class TuitionItem:
    """Read-model: one billed student in one class for one month."""

    person_id: int
    full_name: str
    class_id: int
    class_name: str
    subject: str
    month: int
    year: int
    due_amount: int
    state: PaymentState
    payment: Optional[PaymentStatus] = None

    @property
    def amount(self) -> int:
        if self.payment is not None and self.payment.amount is not None:
            return self.payment.amount
        return self.due_amount

    def as_dict(self) -> dict:
        return {
            "person_id": self.person_id,
            "full_name": self.full_name,
            "class_id": self.class_id,
            "class_name": self.class_name,
            "subject": self.subject,
            "month": self.month,
            "year": self.year,
            "due_amount": self.due_amount,
            "amount": self.amount,
            "state": self.state.value,
            "payment_id": self.payment.payment_id if self.payment else None,
            "paid_at": _iso(self.payment.paid_at) if self.payment else None,
        }


@dataclass(frozen=True)
class TuitionSummary:
    total_paid: int = 0
    total_unpaid: int = 0
    total_not_created: int = 0
    paid_count: int = 0
    unpaid_count: int = 0
    not_created_count: int = 0

    @classmethod
    def from_items(cls, items) -> "TuitionSummary":
        totals = {state: [0, 0] for state in PaymentState}
        for item in items:
            totals[item.state][0] += item.amount
            totals[item.state][1] += 1
        return cls(
            total_paid=totals[PaymentState.PAID][0],
            total_unpaid=totals[PaymentState.UNPAID][0],
            total_not_created=totals[PaymentState.NOT_CREATED][0],
            paid_count=totals[PaymentState.PAID][1],
            unpaid_count=totals[PaymentState.UNPAID][1],
            not_created_count=totals[PaymentState.NOT_CREATED][1],
        )

    def as_dict(self) -> dict:
        return {
            "total_paid": self.total_paid,
            "total_unpaid": self.total_unpaid,
            "total_not_created": self.total_not_created,
            "paid_count": self.paid_count,
            "unpaid_count": self.unpaid_count,
            "not_created_count": self.not_created_count,
        }
