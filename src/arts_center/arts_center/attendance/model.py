from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import MarkedBy, PersonType, TimePeriod
from ..core.quality import DataQualityFinding


@dataclass(frozen=True)
class AttendanceKey:
    class_id: int
    attendance_date: date
    period: TimePeriod
    person_id: int
    person_type: PersonType


@dataclass(frozen=True)
class AttendanceRecord:
    """Thực thể miền (domain): Điểm danh một người trong một buổi học.

    Khoá duy nhất là (lớp, ngày, buổi, người, loại người); ghi lại cùng khoá sẽ
    ghi đè giá trị `present`.
    """

    class_id: int
    attendance_date: date
    period: TimePeriod
    person_id: int
    person_type: PersonType
    present: bool
    recorded_at: datetime
    marked_by: MarkedBy = MarkedBy.ADMIN
    note: Optional[str] = None

    @property
    def key(self) -> AttendanceKey:
        return AttendanceKey(
            class_id=self.class_id,
            attendance_date=self.attendance_date,
            period=self.period,
            person_id=self.person_id,
            person_type=self.person_type,
        )

    def as_dict(self) -> dict:
        return {
            "class_id": self.class_id,
            "date": self.attendance_date.isoformat(),
            "period": self.period.value,
            "person_id": self.person_id,
            "person_type": self.person_type.value,
            "present": self.present,
            "marked_by": self.marked_by.value,
            "note": self.note,
            "recorded_at": self.recorded_at.isoformat(timespec="seconds"),
        }


@dataclass(frozen=True)
class AttendanceFilters:
    class_id: Optional[int] = None
    person_id: Optional[int] = None
    person_type: Optional[PersonType] = None
    period: Optional[TimePeriod] = None
    present: Optional[bool] = None

    def matches(self, r: AttendanceRecord) -> bool:
        if self.class_id is not None and r.class_id != self.class_id:
            return False
        if self.person_id is not None and r.person_id != self.person_id:
            return False
        if self.person_type is not None and r.person_type != self.person_type:
            return False
        if self.period is not None and r.period != self.period:
            return False
        if self.present is not None and r.present != self.present:
            return False
        return True


@dataclass(frozen=True)
class UpsertResult:
    record: AttendanceRecord
    warnings: tuple[DataQualityFinding, ...] = ()

    @property
    def flagged(self) -> bool:
        return bool(self.warnings)


def sort_key(r: AttendanceRecord) -> tuple:
    return r.attendance_date, r.class_id, r.period.rank, r.person_type.value, r.person_id
