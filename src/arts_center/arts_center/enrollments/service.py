from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, Optional

from ..classes.repository import ClassRepository
from ..common.validators import normalize_note, require_date, require_enrollment_status, require_person_type
from ..core.enums import EnrollmentStatus, FindingCode, PersonType
from ..core.exceptions import InvalidTransitionError, NotFoundError, ValidationError
from ..core.quality import DataQualityFinding, report_finding
from ..people.repository import PersonRepository
from .model import INITIAL_STATUSES, Enrollment, can_transition
from .repository import EnrollmentRepository

logger = logging.getLogger(__name__)


class EnrollmentRegistry:
    """Eligibility queries and the enrollment state machine.

    Eligibility: some row for (person, class) has status trial/active and its
    [start_date, end_date or +inf] interval contains the date.
    """

    def __init__(
        self,
        enrollments: EnrollmentRepository,
        *,
        classes: ClassRepository | None = None,
        people: PersonRepository | None = None,
    ):
        self._enrollments = enrollments
        self._classes = classes
        self._people = people

    def is_eligible(
        self,
        person_id: int,
        class_id: int,
        on_date: date,
        *,
        person_type: PersonType = PersonType.STUDENT,
    ) -> bool:
        on_date = require_date(on_date)
        rows = self._enrollments.list_for_person_class(
            person_id=int(person_id), class_id=int(class_id), person_type=require_person_type(person_type)
        )
        return any(r.is_attending and r.covers(on_date) for r in rows)

    def eligible_people(
        self,
        class_id: int,
        on_date: date,
        *,
        person_type: PersonType = PersonType.STUDENT,
    ) -> list[int]:
        on_date = require_date(on_date)
        rows = self._enrollments.list_for_class(int(class_id), person_type=require_person_type(person_type))
        return sorted({r.person_id for r in rows if r.is_attending and r.covers(on_date)})

    def find_unenrolled(
        self,
        all_person_ids: Iterable[int],
        as_of: date,
        *,
        person_type: PersonType = PersonType.STUDENT,
    ) -> set[int]:
        """Persons with no enrollment row (any status) covering `as_of`."""

        as_of = require_date(as_of)
        person_type = require_person_type(person_type)
        covering = self._enrollments.list_overlapping(start=as_of, end=as_of, person_type=person_type)
        enrolled = {r.person_id for r in covering if r.covers(as_of)}
        unenrolled = {int(p) for p in all_person_ids} - enrolled

        if unenrolled:
            report_finding(
                DataQualityFinding(
                    code=FindingCode.UNENROLLED_PERSON,
                    message=f"{len(unenrolled)} {person_type.value} chưa được xếp lớp tại {as_of.isoformat()}",
                    context={"person_type": person_type.value, "as_of": as_of.isoformat(), "count": len(unenrolled)},
                ),
                logger=logger,
            )
        return unenrolled

    def audit_unenrolled(self, as_of: date, *, person_type: PersonType = PersonType.STUDENT) -> list[dict]:
        """Unenrolled active persons with their names, for the audit script/report."""

        if self._people is None:
            raise ValidationError("Thiếu nguồn dữ liệu học viên/giáo viên")
        persons = self._people.list_all(require_person_type(person_type), active_only=True)
        missing = self.find_unenrolled((p.person_id for p in persons), as_of, person_type=person_type)
        return [
            {"person_id": p.person_id, "full_name": p.full_name, "phone": p.phone}
            for p in persons
            if p.person_id in missing
        ]

    def enroll(
        self,
        *,
        person_id: int,
        class_id: int,
        start_date: date,
        status: EnrollmentStatus = EnrollmentStatus.ACTIVE,
        person_type: PersonType = PersonType.STUDENT,
    ) -> Enrollment:
        status = require_enrollment_status(status)
        person_type = require_person_type(person_type)
        start_date = require_date(start_date)
        if status not in INITIAL_STATUSES:
            raise InvalidTransitionError("Ghi danh mới chỉ được ở trạng thái học thử hoặc đang học")

        if self._classes is not None and not self._classes.get_by_id(int(class_id)):
            raise NotFoundError(f"Lớp học {class_id} không tồn tại")
        if self._people is not None and not self._people.get_by_id(person_type, int(person_id)):
            raise NotFoundError(f"{person_type.value} {person_id} không tồn tại")

        enrollment_id = self._enrollments.create(
            person_id=int(person_id),
            person_type=person_type,
            class_id=int(class_id),
            status=status,
            start_date=start_date,
        )
        logger.info("enrolled %s %s in class %s as %s", person_type.value, person_id, class_id, status.value)
        return Enrollment(
            enrollment_id=enrollment_id,
            person_id=int(person_id),
            person_type=person_type,
            class_id=int(class_id),
            status=status,
            start_date=start_date,
        )

    def transition(
        self,
        enrollment_id: int,
        new_status: EnrollmentStatus,
        *,
        on_date: Optional[date] = None,
        leave_reason: Optional[str] = None,
    ) -> Enrollment:
        """Apply one edge of the transition table.

        Moving to inactive closes the interval at `on_date` (default: today).
        Re-enrolling after inactive is a new row via `enroll`, never a transition.
        """

        new_status = require_enrollment_status(new_status)
        current = self._enrollments.get_by_id(int(enrollment_id))
        if not current:
            raise NotFoundError(f"Ghi danh {enrollment_id} không tồn tại")
        if not can_transition(current.status, new_status):
            raise InvalidTransitionError(
                f"Không thể chuyển trạng thái {current.status.value} -> {new_status.value}"
            )

        end_date = None
        reason = None
        if new_status == EnrollmentStatus.INACTIVE:
            end_date = require_date(on_date) if on_date is not None else date.today()
            if end_date < current.start_date:
                raise ValidationError("Ngày nghỉ phải sau ngày ghi danh")
            reason = normalize_note(leave_reason)

        if not self._enrollments.update_status(
            enrollment_id=current.enrollment_id,
            status=new_status,
            end_date=end_date,
            leave_reason=reason,
        ):
            raise NotFoundError(f"Ghi danh {enrollment_id} không tồn tại")

        logger.info(
            "enrollment %s: %s -> %s", current.enrollment_id, current.status.value, new_status.value
        )
        return Enrollment(
            enrollment_id=current.enrollment_id,
            person_id=current.person_id,
            person_type=current.person_type,
            class_id=current.class_id,
            status=new_status,
            start_date=current.start_date,
            end_date=end_date or current.end_date,
            leave_reason=reason or current.leave_reason,
        )
