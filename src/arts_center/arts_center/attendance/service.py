from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Iterable, Mapping, Optional

from ..classes.model import ClassSchedule
from ..common.datetime_utils import now_local
from ..common.validators import (
    normalize_note,
    require_date,
    require_marked_by,
    require_period,
    require_person_type,
    require_range,
)
from ..core.enums import FindingCode, MarkedBy, PersonType, TimePeriod
from ..core.exceptions import NotFoundError, ValidationError
from ..core.quality import DataQualityFinding, report_finding
from ..enrollments.service import EnrollmentRegistry
from ..people.repository import PersonRepository
from ..schedules.service import ScheduleService
from .model import AttendanceFilters, AttendanceRecord, UpsertResult, sort_key
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def _require_id(value, field_name: str) -> int:
    try:
        value = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} không hợp lệ")
    if value <= 0:
        raise ValidationError(f"{field_name} không hợp lệ")
    return value


def _require_present(value) -> bool:
    if not isinstance(value, bool):
        raise ValidationError("Giá trị có mặt phải là true/false")
    return value


class AttendanceLedger:
    """Per-session, per-person attendance with upsert semantics.

    Eligibility and schedule mismatches are flagged as data-quality findings;
    the write itself is never rejected for them (make-up sessions, overrides).
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        enrollments: EnrollmentRegistry,
        schedules: ScheduleService,
        *,
        people: Optional[PersonRepository] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._enrollments = enrollments
        self._schedules = schedules
        self._people = people
        self._clock = clock

    def upsert_attendance(
        self,
        class_id: int,
        on_date: date,
        period: TimePeriod | str,
        person_id: int,
        person_type: PersonType | str,
        present: bool,
        *,
        marked_by: MarkedBy = MarkedBy.ADMIN,
        note: Optional[str] = None,
    ) -> UpsertResult:
        class_id = _require_id(class_id, "Lớp học")
        on_date = require_date(on_date)
        period = require_period(period)
        person_type = require_person_type(person_type)
        person_id = _require_id(person_id, "Người học")
        present = _require_present(present)

        schedule = self._schedules.get_class(class_id)
        return self._write(
            schedule,
            on_date=on_date,
            period=period,
            person_id=person_id,
            person_type=person_type,
            present=present,
            marked_by=require_marked_by(marked_by),
            note=normalize_note(note),
        )

    def bulk_upsert(
        self,
        class_id: int,
        on_date: date,
        period: TimePeriod | str,
        entries: Mapping[int, bool] | Iterable[tuple[int, bool]],
        *,
        person_type: PersonType | str = PersonType.STUDENT,
        marked_by: MarkedBy = MarkedBy.ADMIN,
    ) -> list[UpsertResult]:
        """Điểm danh cả buổi: mỗi phần tử là (person_id, present)."""

        class_id = _require_id(class_id, "Lớp học")
        on_date = require_date(on_date)
        period = require_period(period)
        person_type = require_person_type(person_type)
        pairs = list(entries.items()) if isinstance(entries, Mapping) else list(entries)
        validated = [(_require_id(pid, "Người học"), _require_present(p)) for pid, p in pairs]
        if not validated:
            return []

        schedule = self._schedules.get_class(class_id)
        return [
            self._write(
                schedule,
                on_date=on_date,
                period=period,
                person_id=pid,
                person_type=person_type,
                present=present,
                marked_by=require_marked_by(marked_by),
                note=None,
            )
            for pid, present in validated
        ]

    def _write(
        self,
        schedule: ClassSchedule,
        *,
        on_date: date,
        period: TimePeriod,
        person_id: int,
        person_type: PersonType,
        present: bool,
        marked_by: MarkedBy,
        note: Optional[str],
    ) -> UpsertResult:
        if self._people is not None and not self._people.get_by_id(person_type, person_id):
            raise NotFoundError(f"{person_type.value} {person_id} không tồn tại")

        findings: list[DataQualityFinding] = []
        context = {
            "class_id": schedule.class_id,
            "date": on_date.isoformat(),
            "period": period.value,
            "person_id": person_id,
            "person_type": person_type.value,
        }

        if not self._schedules.resolver.is_scheduled(schedule, on_date, period):
            findings.append(
                report_finding(
                    DataQualityFinding(
                        code=FindingCode.OFF_SCHEDULE_ATTENDANCE,
                        message=f"Lớp {schedule.name} không có lịch học buổi {period.label} ngày {on_date.isoformat()}",
                        context=context,
                    ),
                    logger=logger,
                )
            )

        if not self._enrollments.is_eligible(person_id, schedule.class_id, on_date, person_type=person_type):
            findings.append(
                report_finding(
                    DataQualityFinding(
                        code=FindingCode.UNCOVERED_ATTENDANCE,
                        message=f"{person_type.value} {person_id} không có ghi danh hợp lệ tại lớp {schedule.name} ngày {on_date.isoformat()}",
                        context=context,
                    ),
                    logger=logger,
                )
            )

        stored = self._attendance.upsert(
            AttendanceRecord(
                class_id=schedule.class_id,
                attendance_date=on_date,
                period=period,
                person_id=person_id,
                person_type=person_type,
                present=present,
                recorded_at=self._clock(),
                marked_by=marked_by,
                note=note,
            )
        )
        logger.debug("attendance upserted %s present=%s", context, present)
        return UpsertResult(record=stored, warnings=tuple(findings))

    def list_by_class_date(
        self,
        class_id: int,
        on_date: date,
        *,
        person_type: PersonType | str = PersonType.STUDENT,
    ) -> dict[TimePeriod, dict[int, bool]]:
        """period -> (person_id -> present).

        A missing entry means "not recorded", which is different from present=False.
        """

        rows = self._attendance.list_by_class_date(
            class_id=_require_id(class_id, "Lớp học"),
            attendance_date=require_date(on_date),
            person_type=require_person_type(person_type),
        )
        out: dict[TimePeriod, dict[int, bool]] = {}
        for r in sorted(rows, key=sort_key):
            out.setdefault(r.period, {})[r.person_id] = r.present
        return out

    def list_by_date_range(
        self,
        start: date,
        end: date,
        filters: Optional[AttendanceFilters] = None,
    ) -> list[AttendanceRecord]:
        start, end = require_range(start, end)
        rows = self._attendance.list_range(start=start, end=end, filters=filters)
        return sorted(rows, key=sort_key)
