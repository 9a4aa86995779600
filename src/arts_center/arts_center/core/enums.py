from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Vai trò người dùng dùng cho phân quyền."""

    ADMIN = "admin"
    TEACHER = "teacher"


class PersonType(str, Enum):
    STUDENT = "student"
    TEACHER = "teacher"


class EnrollmentStatus(str, Enum):
    """Trạng thái ghi danh: học thử, đang học, ngừng học."""

    TRIAL = "trial"
    ACTIVE = "active"
    INACTIVE = "inactive"

    @property
    def is_attending(self) -> bool:
        return self in (EnrollmentStatus.TRIAL, EnrollmentStatus.ACTIVE)


class TimePeriod(str, Enum):
    """Buổi học trong ngày (Sáng, Chiều, Tối).

    Thứ tự khai báo chính là thứ tự thời gian trong ngày; dùng `rank` để sắp xếp,
    không sắp theo chuỗi.
    """

    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"

    @property
    def rank(self) -> int:
        return _PERIOD_ORDER.index(self)

    @property
    def label(self) -> str:
        return _PERIOD_LABELS[self]


_PERIOD_ORDER = (TimePeriod.MORNING, TimePeriod.AFTERNOON, TimePeriod.EVENING)
_PERIOD_LABELS = {
    TimePeriod.MORNING: "Sáng",
    TimePeriod.AFTERNOON: "Chiều",
    TimePeriod.EVENING: "Tối",
}


class MarkedBy(str, Enum):
    TEACHER = "teacher"
    ADMIN = "admin"


class ProrationMode(str, Enum):
    FULL_MONTH = "full_month"
    CUTOFF_DAY = "cutoff_day"
    LINEAR = "linear"


class FindingCode(str, Enum):
    MISSING_FEE = "MISSING_FEE"
    CONFLICTING_FEE = "CONFLICTING_FEE"
    UNCOVERED_ATTENDANCE = "UNCOVERED_ATTENDANCE"
    OFF_SCHEDULE_ATTENDANCE = "OFF_SCHEDULE_ATTENDANCE"
    UNENROLLED_PERSON = "UNENROLLED_PERSON"


class PaymentState(str, Enum):
    """Tình trạng học phí của một học viên trong tháng."""

    NOT_CREATED = "not_created"
    PAID = "paid"
    UNPAID = "unpaid"
