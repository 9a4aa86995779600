from __future__ import annotations

from datetime import date

import pytest

from src.arts_center.arts_center.classes.model import ClassSchedule
from src.arts_center.arts_center.core.enums import PersonType
from src.arts_center.arts_center.finance.expense_classifier import is_teacher_salary_expense
from src.arts_center.arts_center.payroll.calculator.per_session_calculator import PerSessionSalaryCalculator
from src.arts_center.arts_center.payroll.service import TeacherSalaryService


@pytest.fixture
def salaries(classes_repo, people_repo, enrollments_repo, expenses_repo, ledger, piano_class):
    classes_repo.add(piano_class(), teacher_ids=[10])
    classes_repo.add(piano_class(class_id=2, name="Piano-B1", salary_per_session=200000), teacher_ids=[10, 11])
    people_repo.add(PersonType.TEACHER, 10, "Cô Hà")
    people_repo.add(PersonType.TEACHER, 11, "Thầy Quân")
    for class_id in (1, 2):
        enrollments_repo.add(10, class_id, date(2024, 1, 1), person_type=PersonType.TEACHER)
    enrollments_repo.add(11, 2, date(2024, 1, 1), person_type=PersonType.TEACHER)
    return TeacherSalaryService(classes_repo, ledger, people=people_repo, expenses=expenses_repo)


def _teach(ledger, class_id, day, teacher_id, present=True):
    ledger.upsert_attendance(class_id, date(2024, 1, day), "morning", teacher_id, "teacher", present)


def test_per_session_calculator():
    schedule = ClassSchedule(class_id=1, name="A", subject="Piano", salary_per_session=150000)

    assert PerSessionSalaryCalculator().salary_for(schedule, 3) == 450000
    assert PerSessionSalaryCalculator().salary_for(schedule, -1) == 0


def test_salary_counts_present_sessions_only(salaries, ledger):
    for day in (1, 8, 15):
        _teach(ledger, 1, day, 10)
    _teach(ledger, 1, 22, 10, present=False)
    _teach(ledger, 2, 8, 10)
    _teach(ledger, 1, 5, 10)  # buổi dạy bù ngoài lịch vẫn được tính

    lines = salaries.salary_details(10, 1, 2024)

    assert [(l.class_name, l.sessions, l.total) for l in lines] == [
        ("Piano-A3", 4, 600000),
        ("Piano-B1", 1, 200000),
    ]
    assert salaries.salary_for_month(10, 1, 2024) == 800000
    assert salaries.salary_for_month(10, 2, 2024) == 0


def test_all_teachers_sorted_by_total(salaries, ledger):
    _teach(ledger, 2, 1, 11)
    _teach(ledger, 1, 1, 10)

    rows = salaries.all_teachers(1, 2024)

    assert [(r["teacher_id"], r["total_salary"]) for r in rows] == [(11, 200000), (10, 150000)]


def test_sync_salary_expense_is_rerunnable(salaries, ledger, expenses_repo):
    _teach(ledger, 1, 1, 10)
    first_id = salaries.sync_salary_expense(1, 2024)
    _teach(ledger, 1, 8, 10)
    second_id = salaries.sync_salary_expense(1, 2024)

    assert first_id == second_id
    expense = expenses_repo.rows[first_id]
    assert expense.reason == "Lương T1/2024"
    assert expense.amount == 300000
    assert is_teacher_salary_expense(expense.reason)
