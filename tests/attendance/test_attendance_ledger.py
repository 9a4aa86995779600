from __future__ import annotations

from datetime import date

import pytest

from src.arts_center.arts_center.attendance.model import AttendanceFilters
from src.arts_center.arts_center.core.enums import FindingCode, MarkedBy, PersonType, TimePeriod
from src.arts_center.arts_center.core.exceptions import DataQualityWarning, NotFoundError, ValidationError

MONDAY = date(2024, 1, 15)
TUESDAY = date(2024, 1, 16)


@pytest.fixture
def setup(classes_repo, people_repo, enrollments_repo, piano_class):
    classes_repo.add(piano_class())
    people_repo.add(PersonType.STUDENT, 1, "An")
    people_repo.add(PersonType.STUDENT, 2, "Bình")
    people_repo.add(PersonType.TEACHER, 10, "Cô Hà")
    enrollments_repo.add(1, 1, date(2024, 1, 1))
    enrollments_repo.add(10, 1, date(2024, 1, 1), person_type=PersonType.TEACHER)


def test_upsert_is_idempotent(setup, ledger, attendance_repo):
    first = ledger.upsert_attendance(1, MONDAY, "morning", 1, "student", True)
    second = ledger.upsert_attendance(1, MONDAY, "morning", 1, "student", True)

    assert not first.flagged and not second.flagged
    assert len(attendance_repo.rows) == 1
    assert ledger.list_by_class_date(1, MONDAY) == {TimePeriod.MORNING: {1: True}}


def test_second_write_overwrites_present(setup, ledger, attendance_repo):
    ledger.upsert_attendance(1, MONDAY, TimePeriod.MORNING, 1, PersonType.STUDENT, True)
    ledger.upsert_attendance(1, MONDAY, TimePeriod.MORNING, 1, PersonType.STUDENT, False)

    assert len(attendance_repo.rows) == 1
    assert ledger.list_by_class_date(1, MONDAY)[TimePeriod.MORNING] == {1: False}


def test_not_recorded_differs_from_absent(setup, ledger):
    ledger.upsert_attendance(1, MONDAY, "morning", 1, "student", False)

    matrix = ledger.list_by_class_date(1, MONDAY)
    assert matrix[TimePeriod.MORNING][1] is False
    assert 2 not in matrix[TimePeriod.MORNING]
    assert TimePeriod.AFTERNOON not in matrix


def test_uncovered_attendance_is_stored_with_warning(setup, ledger, attendance_repo):
    with pytest.warns(DataQualityWarning):
        result = ledger.upsert_attendance(1, MONDAY, "morning", 2, "student", True)

    assert [w.code for w in result.warnings] == [FindingCode.UNCOVERED_ATTENDANCE]
    assert result.record.present is True
    assert len(attendance_repo.rows) == 1


def test_off_schedule_attendance_is_stored_with_warning(setup, ledger):
    with pytest.warns(DataQualityWarning):
        result = ledger.upsert_attendance(1, TUESDAY, "evening", 1, "student", True)

    assert [w.code for w in result.warnings] == [FindingCode.OFF_SCHEDULE_ATTENDANCE]
    assert ledger.list_by_class_date(1, TUESDAY) == {TimePeriod.EVENING: {1: True}}


def test_students_and_teachers_are_separate_keys(setup, ledger):
    ledger.upsert_attendance(1, MONDAY, "morning", 1, "student", True)
    ledger.upsert_attendance(1, MONDAY, "morning", 10, "teacher", False, marked_by=MarkedBy.ADMIN)

    assert ledger.list_by_class_date(1, MONDAY, person_type=PersonType.STUDENT) == {TimePeriod.MORNING: {1: True}}
    assert ledger.list_by_class_date(1, MONDAY, person_type="teacher") == {TimePeriod.MORNING: {10: False}}


def test_note_is_kept_when_rewrite_has_none(setup, ledger):
    ledger.upsert_attendance(1, MONDAY, "morning", 1, "student", False, note=" ốm ")
    result = ledger.upsert_attendance(1, MONDAY, "morning", 1, "student", True)

    assert result.record.note == "ốm"
    assert result.record.present is True


@pytest.mark.parametrize(
    "args",
    [
        (1, MONDAY, "noon", 1, "student", True),
        (1, MONDAY, "morning", 1, "parent", True),
        (1, MONDAY, "morning", 1, "student", "yes"),
        (1, MONDAY, "morning", 0, "student", True),
        (1, "2024-01-15", "morning", 1, "student", True),
    ],
)
def test_invalid_input_is_rejected(setup, ledger, attendance_repo, args):
    with pytest.raises(ValidationError):
        ledger.upsert_attendance(*args)
    assert attendance_repo.writes == 0


def test_unknown_class_or_person(setup, ledger):
    with pytest.raises(NotFoundError):
        ledger.upsert_attendance(99, MONDAY, "morning", 1, "student", True)
    with pytest.raises(NotFoundError):
        ledger.upsert_attendance(1, MONDAY, "morning", 77, "student", True)


def test_bulk_upsert_validates_before_writing(setup, ledger, attendance_repo):
    with pytest.raises(ValidationError):
        ledger.bulk_upsert(1, MONDAY, "morning", [(1, True), (2, "x")])
    assert attendance_repo.writes == 0


def test_bulk_upsert_marks_whole_session(setup, ledger):
    with pytest.warns(DataQualityWarning):
        results = ledger.bulk_upsert(1, MONDAY, "morning", {1: True, 2: False}, marked_by="teacher")

    assert len(results) == 2
    assert [r.flagged for r in results] == [False, True]
    assert all(r.record.marked_by == MarkedBy.TEACHER for r in results)
    assert ledger.list_by_class_date(1, MONDAY) == {TimePeriod.MORNING: {1: True, 2: False}}


def test_list_by_date_range_filters_and_orders(setup, ledger):
    ledger.upsert_attendance(1, date(2024, 1, 22), "morning", 1, "student", True)
    ledger.upsert_attendance(1, date(2024, 1, 8), "morning", 1, "student", False)
    ledger.upsert_attendance(1, MONDAY, "morning", 1, "student", True)
    ledger.upsert_attendance(1, MONDAY, "morning", 10, "teacher", True)

    rows = ledger.list_by_date_range(date(2024, 1, 1), date(2024, 1, 31), AttendanceFilters(person_type=PersonType.STUDENT))
    assert [r.attendance_date for r in rows] == [date(2024, 1, 8), MONDAY, date(2024, 1, 22)]

    present = ledger.list_by_date_range(date(2024, 1, 1), date(2024, 1, 31), AttendanceFilters(present=True))
    assert len(present) == 3

    with pytest.raises(ValidationError):
        ledger.list_by_date_range(date(2024, 2, 1), date(2024, 1, 1))
