from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Optional

import pytest

from src.arts_center.arts_center.attendance.model import AttendanceFilters, AttendanceKey, AttendanceRecord
from src.arts_center.arts_center.attendance.service import AttendanceLedger
from src.arts_center.arts_center.classes.model import ClassSchedule, ScheduleSlot
from src.arts_center.arts_center.core.enums import EnrollmentStatus, PersonType, TimePeriod
from src.arts_center.arts_center.enrollments.model import Enrollment
from src.arts_center.arts_center.enrollments.service import EnrollmentRegistry
from src.arts_center.arts_center.finance.model import Expense
from src.arts_center.arts_center.payments.model import PaymentStatus
from src.arts_center.arts_center.people.model import Person
from src.arts_center.arts_center.schedules.service import ScheduleService


class InMemoryClasses:
    def __init__(self):
        self.by_id: dict[int, ClassSchedule] = {}
        self.teachers: dict[int, list[int]] = {}

    def add(self, schedule: ClassSchedule, *, teacher_ids=()) -> ClassSchedule:
        self.by_id[schedule.class_id] = schedule
        self.teachers[schedule.class_id] = list(teacher_ids)
        return schedule

    def get_by_id(self, class_id: int) -> Optional[ClassSchedule]:
        return self.by_id.get(int(class_id))

    def list_all(self, *, active_only: bool = False):
        items = [c for c in self.by_id.values() if c.is_active or not active_only]
        return sorted(items, key=lambda c: c.name)

    def list_teacher_ids(self, class_id: int):
        return list(self.teachers.get(int(class_id), []))

    def list_class_ids_for_teacher(self, teacher_id: int):
        return [cid for cid, tids in self.teachers.items() if int(teacher_id) in tids]


class InMemoryPeople:
    def __init__(self):
        self.by_key: dict[tuple[PersonType, int], Person] = {}

    def add(self, person_type: PersonType, person_id: int, full_name: str, *, is_active: bool = True) -> Person:
        p = Person(person_id=person_id, person_type=person_type, full_name=full_name, phone=None, is_active=is_active)
        self.by_key[(person_type, person_id)] = p
        return p

    def get_by_id(self, person_type: PersonType, person_id: int) -> Optional[Person]:
        return self.by_key.get((person_type, int(person_id)))

    def list_all(self, person_type: PersonType, *, active_only: bool = False):
        items = [p for (t, _), p in self.by_key.items() if t == person_type and (p.is_active or not active_only)]
        return sorted(items, key=lambda p: p.full_name)

    def list_by_ids(self, person_type: PersonType, person_ids):
        ids = {int(i) for i in person_ids}
        return [p for p in self.list_all(person_type) if p.person_id in ids]


class InMemoryEnrollments:
    def __init__(self):
        self.rows: dict[int, Enrollment] = {}
        self._next_id = 1

    def add(
        self,
        person_id: int,
        class_id: int,
        start_date: date,
        *,
        end_date: Optional[date] = None,
        status: EnrollmentStatus = EnrollmentStatus.ACTIVE,
        person_type: PersonType = PersonType.STUDENT,
    ) -> Enrollment:
        enrollment_id = self.create(
            person_id=person_id, person_type=person_type, class_id=class_id, status=status, start_date=start_date
        )
        if end_date is not None:
            self.update_status(enrollment_id=enrollment_id, status=status, end_date=end_date)
        return self.rows[enrollment_id]

    def get_by_id(self, enrollment_id: int) -> Optional[Enrollment]:
        return self.rows.get(int(enrollment_id))

    def list_for_person_class(self, *, person_id, class_id, person_type):
        return [
            r
            for r in self.rows.values()
            if r.person_id == int(person_id) and r.class_id == int(class_id) and r.person_type == person_type
        ]

    def list_for_class(self, class_id, *, person_type=None):
        return [
            r
            for r in self.rows.values()
            if r.class_id == int(class_id) and (person_type is None or r.person_type == person_type)
        ]

    def list_overlapping(self, *, start, end, person_type=None, statuses=None, class_id=None):
        wanted = set(statuses) if statuses is not None else None
        return [
            r
            for r in self.rows.values()
            if r.overlaps(start, end)
            and (person_type is None or r.person_type == person_type)
            and (wanted is None or r.status in wanted)
            and (class_id is None or r.class_id == int(class_id))
        ]

    def create(self, *, person_id, person_type, class_id, status, start_date) -> int:
        enrollment_id = self._next_id
        self._next_id += 1
        self.rows[enrollment_id] = Enrollment(
            enrollment_id=enrollment_id,
            person_id=int(person_id),
            person_type=person_type,
            class_id=int(class_id),
            status=status,
            start_date=start_date,
        )
        return enrollment_id

    def update_status(self, *, enrollment_id, status, end_date=None, leave_reason=None) -> bool:
        r = self.rows.get(int(enrollment_id))
        if not r:
            return False
        self.rows[r.enrollment_id] = Enrollment(
            enrollment_id=r.enrollment_id,
            person_id=r.person_id,
            person_type=r.person_type,
            class_id=r.class_id,
            status=status,
            start_date=r.start_date,
            end_date=end_date or r.end_date,
            leave_reason=leave_reason or r.leave_reason,
        )
        return True


class InMemoryAttendance:
    def __init__(self):
        self.rows: dict[AttendanceKey, AttendanceRecord] = {}
        self.writes = 0

    def get(self, key: AttendanceKey) -> Optional[AttendanceRecord]:
        return self.rows.get(key)

    def upsert(self, record: AttendanceRecord) -> AttendanceRecord:
        self.writes += 1
        existing = self.rows.get(record.key)
        if existing is not None and record.note is None and existing.note is not None:
            record = replace(record, note=existing.note)
        self.rows[record.key] = record
        return record

    def list_by_class_date(self, *, class_id, attendance_date, person_type=None):
        return self.list_range(
            start=attendance_date,
            end=attendance_date,
            filters=AttendanceFilters(class_id=int(class_id), person_type=person_type),
        )

    def list_range(self, *, start, end, filters=None):
        filters = filters or AttendanceFilters()
        return [r for r in self.rows.values() if start <= r.attendance_date <= end and filters.matches(r)]


class InMemoryExpenses:
    def __init__(self):
        self.rows: dict[int, Expense] = {}
        self._next_id = 1

    def add(self, reason: str, amount: int, month: int, year: int) -> Expense:
        expense_id = self._next_id
        self._next_id += 1
        self.rows[expense_id] = Expense(
            expense_id=expense_id, reason=reason, amount=amount, month=month, year=year, expense_date=date(year, month, 1)
        )
        return self.rows[expense_id]

    def list_for_year(self, year: int):
        return [e for e in self.rows.values() if e.year == int(year)]

    def list_for_month(self, month: int, year: int):
        return [e for e in self.rows.values() if e.year == int(year) and e.month == int(month)]

    def find_by_reason(self, *, reason, month, year):
        for e in self.list_for_month(month, year):
            if e.reason == reason:
                return e
        return None

    def upsert_by_reason(self, *, reason, amount, month, year) -> int:
        existing = self.find_by_reason(reason=reason, month=month, year=year)
        if existing:
            self.rows[existing.expense_id] = replace(existing, amount=int(amount))
            return existing.expense_id
        return self.add(reason, int(amount), int(month), int(year)).expense_id


class InMemoryPayments:
    def __init__(self):
        self.rows: dict[int, PaymentStatus] = {}
        self._next_id = 1

    def get_by_id(self, payment_id: int) -> Optional[PaymentStatus]:
        return self.rows.get(int(payment_id))

    def find(self, *, person_id, class_id, month, year) -> Optional[PaymentStatus]:
        for p in self.rows.values():
            if (p.person_id, p.class_id, p.month, p.year) == (int(person_id), int(class_id), int(month), int(year)):
                return p
        return None

    def list_for_month(self, month, year, *, class_id=None):
        return [
            p
            for p in self.rows.values()
            if p.month == int(month) and p.year == int(year) and (class_id is None or p.class_id == int(class_id))
        ]

    def create(self, *, person_id, class_id, month, year, is_paid, amount, paid_at) -> int:
        payment_id = self._next_id
        self._next_id += 1
        self.rows[payment_id] = PaymentStatus(
            payment_id=payment_id,
            person_id=int(person_id),
            class_id=int(class_id),
            month=int(month),
            year=int(year),
            is_paid=bool(is_paid),
            amount=amount,
            paid_at=paid_at,
        )
        return payment_id

    def update(self, payment_id, *, is_paid, amount, paid_at) -> bool:
        current = self.rows.get(int(payment_id))
        if not current:
            return False
        self.rows[current.payment_id] = replace(current, is_paid=bool(is_paid), amount=amount, paid_at=paid_at)
        return True

FIXED_NOW = datetime(2024, 1, 15, 9, 0, 0)


def _piano_class(class_id: int = 1, **overrides) -> ClassSchedule:
    """Piano-A3: Thứ 2 buổi sáng, học phí 800.000."""

    values = dict(
        class_id=class_id,
        name="Piano-A3",
        subject="Piano",
        slots=(ScheduleSlot(day_of_week=1, period=TimePeriod.MORNING),),
        monthly_fee=800000,
        salary_per_session=150000,
    )
    values.update(overrides)
    return ClassSchedule(**values)


@pytest.fixture
def piano_class():
    return _piano_class


@pytest.fixture
def classes_repo():
    return InMemoryClasses()


@pytest.fixture
def people_repo():
    return InMemoryPeople()


@pytest.fixture
def enrollments_repo():
    return InMemoryEnrollments()


@pytest.fixture
def attendance_repo():
    return InMemoryAttendance()


@pytest.fixture
def expenses_repo():
    return InMemoryExpenses()


@pytest.fixture
def payments_repo():
    return InMemoryPayments()


@pytest.fixture
def schedule_service(classes_repo):
    return ScheduleService(classes_repo)


@pytest.fixture
def registry(enrollments_repo, classes_repo, people_repo):
    return EnrollmentRegistry(enrollments_repo, classes=classes_repo, people=people_repo)


@pytest.fixture
def ledger(attendance_repo, registry, schedule_service, people_repo):
    return AttendanceLedger(attendance_repo, registry, schedule_service, people=people_repo, clock=lambda: FIXED_NOW)
