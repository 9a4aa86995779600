from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable, Iterable, Optional

from ..classes.repository import ClassRepository
from ..common.datetime_utils import month_bounds, now_local
from ..common.validators import require_amount, require_month, require_payment_state
from ..core.enums import PaymentState, PersonType
from ..core.exceptions import NotFoundError, ValidationError
from ..enrollments.model import BILLABLE_STATUSES
from ..enrollments.repository import EnrollmentRepository
from ..people.repository import PersonRepository
from ..tuition.model import FeeSchedule
from ..tuition.service import FeeEngine
from .model import PaymentStatus, PaymentUpdate, TuitionItem, TuitionSummary
from .repository import PaymentRepository

logger = logging.getLogger(__name__)


class TuitionPaymentService:
    """Ghi nhận học phí đã đóng / chưa đóng theo (học viên, lớp, tháng).

    Marking a row paid without a `paid_at` stamps the current time; marking it
    unpaid clears `paid_at`.
    """

    def __init__(
        self,
        payments: PaymentRepository,
        classes: ClassRepository,
        enrollments: EnrollmentRepository,
        fee_engine: FeeEngine,
        *,
        people: Optional[PersonRepository] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._payments = payments
        self._classes = classes
        self._enrollments = enrollments
        self._fee_engine = fee_engine
        self._people = people
        self._clock = clock

    def create_payment(
        self,
        *,
        person_id: int,
        class_id: int,
        month: int,
        year: int,
        is_paid: bool = False,
        amount: Optional[int] = None,
        paid_at: Optional[datetime] = None,
    ) -> PaymentStatus:
        month, year = require_month(month, year)
        amount = require_amount(amount)
        if not self._classes.get_by_id(int(class_id)):
            raise NotFoundError(f"Lớp học {class_id} không tồn tại")
        if self._people is not None and not self._people.get_by_id(PersonType.STUDENT, int(person_id)):
            raise NotFoundError(f"Học viên {person_id} không tồn tại")
        if self._payments.find(person_id=int(person_id), class_id=int(class_id), month=month, year=year):
            raise ValidationError("Học phí cho học sinh này và lớp này trong tháng/năm đã tồn tại")

        is_paid = bool(is_paid)
        paid_at = (paid_at or self._clock()) if is_paid else None
        payment_id = self._payments.create(
            person_id=int(person_id),
            class_id=int(class_id),
            month=month,
            year=year,
            is_paid=is_paid,
            amount=amount,
            paid_at=paid_at,
        )
        logger.info(
            "payment %s created: student %s class %s %s/%s paid=%s",
            payment_id, person_id, class_id, month, year, is_paid,
        )
        return PaymentStatus(
            payment_id=payment_id,
            person_id=int(person_id),
            class_id=int(class_id),
            month=month,
            year=year,
            is_paid=is_paid,
            amount=amount,
            paid_at=paid_at,
        )

    def update_payment(
        self,
        payment_id: int,
        *,
        is_paid: Optional[bool] = None,
        amount: Optional[int] = None,
        paid_at: Optional[datetime] = None,
    ) -> PaymentStatus:
        current = self._payments.get_by_id(int(payment_id))
        if not current:
            raise NotFoundError(f"Học phí {payment_id} không tồn tại")
        update = PaymentUpdate(payment_id=current.payment_id, is_paid=is_paid, amount=amount, paid_at=paid_at)
        return self._apply(current, update)

    def bulk_update(self, updates: Iterable[PaymentUpdate]) -> list[PaymentStatus]:
        """All ids are checked before anything is written."""

        updates = list(updates)
        if not updates:
            raise ValidationError("Không có học phí nào để cập nhật")

        current: list[PaymentStatus] = []
        for u in updates:
            row = self._payments.get_by_id(int(u.payment_id))
            if not row:
                raise NotFoundError(f"Học phí {u.payment_id} không tồn tại")
            require_amount(u.amount)
            current.append(row)
        return [self._apply(row, u) for row, u in zip(current, updates)]

    def toggle_payment(
        self, *, person_id: int, class_id: int, month: int, year: int, fee_schedule: FeeSchedule
    ) -> PaymentStatus:
        """Flip paid/unpaid; with no row yet, create it as paid for the quoted amount."""

        month, year = require_month(month, year)
        current = self._payments.find(person_id=int(person_id), class_id=int(class_id), month=month, year=year)
        if current is None:
            quote = self._fee_engine.quote(person_id, class_id, month, year, fee_schedule=fee_schedule)
            return self.create_payment(
                person_id=person_id, class_id=class_id, month=month, year=year, is_paid=True, amount=quote.amount
            )
        return self._apply(current, PaymentUpdate(payment_id=current.payment_id, is_paid=not current.is_paid))

    def _apply(self, current: PaymentStatus, update: PaymentUpdate) -> PaymentStatus:
        is_paid = current.is_paid if update.is_paid is None else bool(update.is_paid)
        amount = current.amount if update.amount is None else require_amount(update.amount)
        if not is_paid:
            paid_at = None
        else:
            paid_at = update.paid_at or current.paid_at or self._clock()

        self._payments.update(current.payment_id, is_paid=is_paid, amount=amount, paid_at=paid_at)
        logger.info("payment %s: paid=%s amount=%s", current.payment_id, is_paid, amount)
        return replace(current, is_paid=is_paid, amount=amount, paid_at=paid_at)

    def tuition_items(
        self,
        month: int,
        year: int,
        *,
        fee_schedule: FeeSchedule,
        class_id: Optional[int] = None,
        state: Optional[PaymentState] = None,
    ) -> list[TuitionItem]:
        """Every billed student per class in the month, joined with its payment row."""

        month, year = require_month(month, year)
        state = require_payment_state(state) if state is not None else None
        month_start, month_end = month_bounds(month, year)

        if class_id is not None:
            schedule = self._classes.get_by_id(int(class_id))
            if not schedule:
                raise NotFoundError(f"Lớp học {class_id} không tồn tại")
            classes = {schedule.class_id: schedule}
        else:
            classes = {c.class_id: c for c in self._classes.list_all()}

        rows = self._enrollments.list_overlapping(
            start=month_start,
            end=month_end,
            person_type=PersonType.STUDENT,
            statuses=BILLABLE_STATUSES,
            class_id=class_id,
        )
        billed = self._fee_engine.bill_month(classes, rows, month, year, fee_schedule=fee_schedule)
        payments = {
            (p.class_id, p.person_id): p
            for p in self._payments.list_for_month(month, year, class_id=class_id)
        }
        names = self._student_names({pid for amounts in billed.values() for pid in amounts})

        items: list[TuitionItem] = []
        for cid, amounts in billed.items():
            schedule = classes[cid]
            for person_id, due in amounts.items():
                payment = payments.get((cid, person_id))
                items.append(
                    TuitionItem(
                        person_id=person_id,
                        full_name=names.get(person_id, ""),
                        class_id=cid,
                        class_name=schedule.name,
                        subject=schedule.subject,
                        month=month,
                        year=year,
                        due_amount=due,
                        state=payment.state if payment else PaymentState.NOT_CREATED,
                        payment=payment,
                    )
                )

        if state is not None:
            items = [i for i in items if i.state == state]
        items.sort(key=lambda i: (i.class_name, i.full_name, i.person_id))
        return items

    def summary(
        self, month: int, year: int, *, fee_schedule: FeeSchedule, class_id: Optional[int] = None
    ) -> TuitionSummary:
        items = self.tuition_items(month, year, fee_schedule=fee_schedule, class_id=class_id)
        return TuitionSummary.from_items(items)

    def _student_names(self, person_ids: set[int]) -> dict[int, str]:
        if self._people is None or not person_ids:
            return {}
        return {p.person_id: p.full_name for p in self._people.list_by_ids(PersonType.STUDENT, sorted(person_ids))}
