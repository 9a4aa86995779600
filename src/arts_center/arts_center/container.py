from __future__ import annotations

from dataclasses import dataclass

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.page import AttendancePageAssembler
from .attendance.service import AttendanceLedger
from .classes.mysql_class_repository import MySQLClassRepository
from .core.constants import DEFAULT_PAGE_FETCH_WORKERS, DEFAULT_PRORATION_CUTOFF_DAY
from .core.enums import ProrationMode
from .database.connection import DBConfig, DatabaseConnection
from .enrollments.mysql_enrollment_repository import MySQLEnrollmentRepository
from .enrollments.service import EnrollmentRegistry
from .finance.mysql_expense_repository import MySQLExpenseRepository
from .finance.service import FinancialAggregator
from .payments.mysql_payment_repository import MySQLPaymentRepository
from .payments.service import TuitionPaymentService
from .payroll.service import TeacherSalaryService
from .people.mysql_person_repository import MySQLPersonRepository
from .schedules.resolver import ScheduleResolver
from .schedules.service import ScheduleService
from .tuition.mysql_fee_schedule_repository import MySQLFeeScheduleRepository
from .tuition.policies.factory import ProrationPolicyFactory
from .tuition.service import FeeEngine


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    classes_repo: MySQLClassRepository
    people_repo: MySQLPersonRepository
    enrollments_repo: MySQLEnrollmentRepository
    attendance_repo: MySQLAttendanceRepository
    expenses_repo: MySQLExpenseRepository
    fee_schedule_repo: MySQLFeeScheduleRepository
    payments_repo: MySQLPaymentRepository

    schedule_service: ScheduleService
    enrollment_registry: EnrollmentRegistry
    attendance_ledger: AttendanceLedger
    attendance_page: AttendancePageAssembler
    fee_engine: FeeEngine
    financial_aggregator: FinancialAggregator
    salary_service: TeacherSalaryService
    payment_service: TuitionPaymentService


def build_container(
    *,
    db_config: dict,
    proration_policy: str = ProrationMode.CUTOFF_DAY.value,
    proration_cutoff_day: int = DEFAULT_PRORATION_CUTOFF_DAY,
    page_fetch_workers: int = DEFAULT_PAGE_FETCH_WORKERS,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    classes_repo = MySQLClassRepository(conn)
    people_repo = MySQLPersonRepository(conn)
    enrollments_repo = MySQLEnrollmentRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    expenses_repo = MySQLExpenseRepository(conn)
    fee_schedule_repo = MySQLFeeScheduleRepository(conn)
    payments_repo = MySQLPaymentRepository(conn)

    schedule_service = ScheduleService(classes_repo, ScheduleResolver())
    enrollment_registry = EnrollmentRegistry(enrollments_repo, classes=classes_repo, people=people_repo)
    attendance_ledger = AttendanceLedger(attendance_repo, enrollment_registry, schedule_service, people=people_repo)
    attendance_page = AttendancePageAssembler(
        schedules=schedule_service,
        classes=classes_repo,
        enrollments=enrollment_registry,
        people=people_repo,
        ledger=attendance_ledger,
        max_workers=page_fetch_workers,
    )
    policy = ProrationPolicyFactory(cutoff_day=proration_cutoff_day).for_mode(proration_policy)
    fee_engine = FeeEngine(classes_repo, enrollments_repo, people=people_repo, policy=policy)
    financial_aggregator = FinancialAggregator(
        classes_repo, enrollments_repo, expenses_repo, fee_engine, payments=payments_repo
    )
    payment_service = TuitionPaymentService(
        payments_repo, classes_repo, enrollments_repo, fee_engine, people=people_repo
    )
    salary_service = TeacherSalaryService(
        classes_repo, attendance_ledger, people=people_repo, expenses=expenses_repo
    )

    return Container(
        conn=conn,
        classes_repo=classes_repo,
        people_repo=people_repo,
        enrollments_repo=enrollments_repo,
        attendance_repo=attendance_repo,
        expenses_repo=expenses_repo,
        fee_schedule_repo=fee_schedule_repo,
        payments_repo=payments_repo,
        schedule_service=schedule_service,
        enrollment_registry=enrollment_registry,
        attendance_ledger=attendance_ledger,
        attendance_page=attendance_page,
        fee_engine=fee_engine,
        financial_aggregator=financial_aggregator,
        salary_service=salary_service,
        payment_service=payment_service,
    )
