from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Protocol, Sequence

from ..core.enums import EnrollmentStatus, PersonType
from .model import Enrollment


class EnrollmentRepository(Protocol):
    def get_by_id(self, enrollment_id: int) -> Optional[Enrollment]:
        raise NotImplementedError

    def list_for_person_class(
        self, *, person_id: int, class_id: int, person_type: PersonType
    ) -> Sequence[Enrollment]:
        raise NotImplementedError

    def list_for_class(self, class_id: int, *, person_type: Optional[PersonType] = None) -> Sequence[Enrollment]:
        raise NotImplementedError

    def list_overlapping(
        self,
        *,
        start: date,
        end: date,
        person_type: Optional[PersonType] = None,
        statuses: Optional[Iterable[EnrollmentStatus]] = None,
        class_id: Optional[int] = None,
    ) -> Sequence[Enrollment]:
        """Rows whose [start_date, end_date or +inf] intersects [start, end]."""

        raise NotImplementedError

    def create(
        self,
        *,
        person_id: int,
        person_type: PersonType,
        class_id: int,
        status: EnrollmentStatus,
        start_date: date,
    ) -> int:
        raise NotImplementedError

    def update_status(
        self,
        *,
        enrollment_id: int,
        status: EnrollmentStatus,
        end_date: Optional[date] = None,
        leave_reason: Optional[str] = None,
    ) -> bool:
        raise NotImplementedError
