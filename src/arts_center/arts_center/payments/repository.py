from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import PaymentStatus


class PaymentRepository(Protocol):
    """At most one row per (person_id, class_id, month, year)."""

    def get_by_id(self, payment_id: int) -> Optional[PaymentStatus]:
        raise NotImplementedError

    def find(self, *, person_id: int, class_id: int, month: int, year: int) -> Optional[PaymentStatus]:
        raise NotImplementedError

    def list_for_month(self, month: int, year: int, *, class_id: Optional[int] = None) -> Sequence[PaymentStatus]:
        raise NotImplementedError

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
        """Returns payment_id."""

        raise NotImplementedError

    def update(
        self, payment_id: int, *, is_paid: bool, amount: Optional[int], paid_at: Optional[datetime]
    ) -> bool:
        raise NotImplementedError
