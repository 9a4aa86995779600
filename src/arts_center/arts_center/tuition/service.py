from __future__ import annotations

import logging
from collections import defaultdict
from decimal import ROUND_HALF_UP, Decimal
from fractions import Fraction
from typing import Iterable, Mapping, Optional, Sequence

from ..classes.model import ClassSchedule
from ..classes.repository import ClassRepository
from ..common.datetime_utils import merge_intervals, month_bounds
from ..common.validators import require_month
from ..core.enums import FindingCode, PersonType
from ..core.exceptions import NotFoundError
from ..core.quality import DataQualityFinding, report_finding
from ..enrollments.model import Enrollment
from ..enrollments.repository import EnrollmentRepository
from ..people.repository import PersonRepository
from .model import FeeQuote, FeeSchedule
from .policies.base import ProrationPolicy
from .policies.cutoff_day import CutoffDayPolicy

logger = logging.getLogger(__name__)


def _round_vnd(value: Fraction) -> int:
    return int((Decimal(value.numerator) / Decimal(value.denominator)).quantize(Decimal(1), rounding=ROUND_HALF_UP))


class FeeEngine:
    """Monthly tuition per (student, class).

    A missing or non-positive fee for the class subject bills 0 and emits a
    DataQualityWarning. Otherwise the trial/active enrollment intervals, clipped
    to the month and to the class end date, go through the injected pro-ration
    policy.
    """

    def __init__(
        self,
        classes: ClassRepository,
        enrollments: EnrollmentRepository,
        *,
        people: Optional[PersonRepository] = None,
        policy: Optional[ProrationPolicy] = None,
    ):
        self._classes = classes
        self._enrollments = enrollments
        self._people = people
        self._policy = policy or CutoffDayPolicy()

    @property
    def policy(self) -> ProrationPolicy:
        return self._policy

    def compute_monthly_fee(
        self,
        person_id: int,
        class_id: int,
        month: int,
        year: int,
        *,
        fee_schedule: FeeSchedule,
    ) -> int:
        return self.quote(person_id, class_id, month, year, fee_schedule=fee_schedule).amount

    def quote(
        self,
        person_id: int,
        class_id: int,
        month: int,
        year: int,
        *,
        fee_schedule: FeeSchedule,
    ) -> FeeQuote:
        month, year = require_month(month, year)
        schedule = self._classes.get_by_id(int(class_id))
        if not schedule:
            raise NotFoundError(f"Lớp học {class_id} không tồn tại")
        if self._people is not None and not self._people.get_by_id(PersonType.STUDENT, int(person_id)):
            raise NotFoundError(f"Học viên {person_id} không tồn tại")

        rows = self._enrollments.list_for_person_class(
            person_id=int(person_id), class_id=schedule.class_id, person_type=PersonType.STUDENT
        )
        return self._quote_rows(int(person_id), schedule, rows, month, year, fee_schedule)

    def bill_month(
        self,
        classes: Mapping[int, ClassSchedule],
        rows: Iterable[Enrollment],
        month: int,
        year: int,
        *,
        fee_schedule: FeeSchedule,
    ) -> dict[int, dict[int, int]]:
        """class_id -> {student person_id: amount} for one month.

        Only trial/active student rows that overlap both the month and the class
        dates count. A subject without a valid fee bills 0 here; callers report it
        once through `audit_fee_schedule` instead of once per student.
        """

        month, year = require_month(month, year)
        month_start, month_end = month_bounds(month, year)
        grouped: dict[tuple[int, int], list[Enrollment]] = defaultdict(list)
        for r in rows:
            if r.person_type == PersonType.STUDENT and r.is_attending:
                grouped[(r.class_id, r.person_id)].append(r)

        out: dict[int, dict[int, int]] = defaultdict(dict)
        for (class_id, person_id), person_rows in sorted(grouped.items()):
            schedule = classes.get(class_id)
            if schedule is None:
                logger.warning("enrollment rows reference unknown class %s", class_id)
                continue
            lower, upper = schedule.clip(month_start, month_end)
            if lower > upper or not any(r.overlaps(lower, upper) for r in person_rows):
                continue
            if fee_schedule.has_valid_fee(schedule.subject):
                amount = self._quote_rows(person_id, schedule, person_rows, month, year, fee_schedule).amount
            else:
                amount = 0
            out[class_id][person_id] = amount
        return dict(out)

    def _quote_rows(
        self,
        person_id: int,
        schedule: ClassSchedule,
        rows: Sequence[Enrollment],
        month: int,
        year: int,
        fee_schedule: FeeSchedule,
    ) -> FeeQuote:
        fee = fee_schedule.fee_for(schedule.subject)
        if fee is None or fee <= 0:
            finding = report_finding(
                DataQualityFinding(
                    code=FindingCode.MISSING_FEE,
                    message=f"Môn {schedule.subject} chưa có học phí hợp lệ (lớp {schedule.name})",
                    context={
                        "subject": schedule.subject,
                        "class_id": schedule.class_id,
                        "person_id": person_id,
                        "month": month,
                        "year": year,
                    },
                ),
                logger=logger,
            )
            return FeeQuote(
                person_id=person_id,
                class_id=schedule.class_id,
                subject=schedule.subject,
                month=month,
                year=year,
                monthly_fee=int(fee or 0),
                fraction=Fraction(0),
                amount=0,
                warnings=(finding,),
            )

        fraction = self._coverage_fraction(schedule, rows, month, year)
        return FeeQuote(
            person_id=person_id,
            class_id=schedule.class_id,
            subject=schedule.subject,
            month=month,
            year=year,
            monthly_fee=fee,
            fraction=fraction,
            amount=_round_vnd(fee * fraction),
        )

    def _coverage_fraction(
        self, schedule: ClassSchedule, rows: Iterable[Enrollment], month: int, year: int
    ) -> Fraction:
        month_start, month_end = month_bounds(month, year)
        lower, upper = schedule.clip(month_start, month_end)
        # Several rows (e.g. re-enrollment) bill once; gaps between them are not covered.
        intervals = merge_intervals(
            ((r.start_date, r.end_date) for r in rows if r.is_attending),
            lower,
            upper,
        )
        if not intervals:
            return Fraction(0)

        fraction = self._policy.billable_fraction(
            intervals=intervals,
            month_start=month_start,
            month_end=month_end,
        )
        return min(max(fraction, Fraction(0)), Fraction(1))

    def audit_fee_schedule(
        self, fee_schedule: FeeSchedule, classes: Optional[Iterable[ClassSchedule]] = None
    ) -> list[DataQualityFinding]:
        """Active-class subjects with a missing or non-positive fee."""

        if classes is None:
            classes = self._classes.list_all(active_only=True)

        findings: list[DataQualityFinding] = []
        flagged: set[str] = set()
        for c in classes:
            if not c.is_active or c.subject in flagged or fee_schedule.has_valid_fee(c.subject):
                continue
            flagged.add(c.subject)
            findings.append(
                report_finding(
                    DataQualityFinding(
                        code=FindingCode.MISSING_FEE,
                        message=f"Môn {c.subject} chưa có học phí hợp lệ (lớp {c.name})",
                        context={"subject": c.subject, "class_id": c.class_id, "fee": fee_schedule.fee_for(c.subject)},
                    ),
                    logger=logger,
                )
            )
        return findings
