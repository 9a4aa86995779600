from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import EnrollmentStatus, PersonType

# Không có cạnh nào quay lại "trial"; "inactive" là trạng thái cuối của một dòng ghi danh.
ALLOWED_TRANSITIONS: dict[EnrollmentStatus, frozenset[EnrollmentStatus]] = {
    EnrollmentStatus.TRIAL: frozenset({EnrollmentStatus.ACTIVE, EnrollmentStatus.INACTIVE}),
    EnrollmentStatus.ACTIVE: frozenset({EnrollmentStatus.INACTIVE}),
    EnrollmentStatus.INACTIVE: frozenset(),
}

INITIAL_STATUSES = frozenset({EnrollmentStatus.TRIAL, EnrollmentStatus.ACTIVE})

# Chỉ học thử và đang học được tính học phí.
BILLABLE_STATUSES = (EnrollmentStatus.TRIAL, EnrollmentStatus.ACTIVE)


def can_transition(current: EnrollmentStatus, target: EnrollmentStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


@dataclass(frozen=True)
class Enrollment:
    """Thực thể miền (domain): Ghi danh của một người vào một lớp.

    `end_date` là None nghĩa là chưa kết thúc (bao phủ mọi ngày về sau).
    """

    enrollment_id: int
    person_id: int
    person_type: PersonType
    class_id: int
    status: EnrollmentStatus
    start_date: date
    end_date: Optional[date] = None
    leave_reason: Optional[str] = None

    def covers(self, d: date) -> bool:
        return self.start_date <= d and (self.end_date is None or d <= self.end_date)

    def overlaps(self, start: date, end: date) -> bool:
        return self.start_date <= end and (self.end_date is None or self.end_date >= start)

    @property
    def is_attending(self) -> bool:
        return self.status.is_attending
