from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Sequence

from ..core.enums import EnrollmentStatus, PersonType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, db_cursor, fetchall, fetchone, in_clause
from .model import Enrollment
from .repository import EnrollmentRepository

_COLUMNS = "enrollment_id, person_id, person_type, class_id, status, start_date, end_date, leave_reason"


def _row_to_enrollment(r: dict) -> Enrollment:
    return Enrollment(
        enrollment_id=int(r["enrollment_id"]),
        person_id=int(r["person_id"]),
        person_type=PersonType(r["person_type"]),
        class_id=int(r["class_id"]),
        status=EnrollmentStatus(r["status"]),
        start_date=as_date(r["start_date"]),
        end_date=as_date(r.get("end_date")),
        leave_reason=r.get("leave_reason"),
    )


class MySQLEnrollmentRepository(EnrollmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, enrollment_id: int) -> Optional[Enrollment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM enrollments WHERE enrollment_id=%s", (int(enrollment_id),))
            r = fetchone(cur)
            return _row_to_enrollment(r) if r else None

    def list_for_person_class(
        self, *, person_id: int, class_id: int, person_type: PersonType
    ) -> Sequence[Enrollment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM enrollments
                WHERE person_id=%s AND class_id=%s AND person_type=%s
                ORDER BY start_date ASC
                """,
                (int(person_id), int(class_id), person_type.value),
            )
            return [_row_to_enrollment(r) for r in fetchall(cur)]

    def list_for_class(self, class_id: int, *, person_type: Optional[PersonType] = None) -> Sequence[Enrollment]:
        clauses = ["class_id=%s"]
        params: list[object] = [int(class_id)]
        if person_type is not None:
            clauses.append("person_type=%s")
            params.append(person_type.value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM enrollments WHERE {' AND '.join(clauses)} ORDER BY start_date ASC",
                tuple(params),
            )
            return [_row_to_enrollment(r) for r in fetchall(cur)]

    def list_overlapping(
        self,
        *,
        start: date,
        end: date,
        person_type: Optional[PersonType] = None,
        statuses: Optional[Iterable[EnrollmentStatus]] = None,
        class_id: Optional[int] = None,
    ) -> Sequence[Enrollment]:
        clauses = ["start_date <= %s", "(end_date IS NULL OR end_date >= %s)"]
        params: list[object] = [end, start]

        if person_type is not None:
            clauses.append("person_type=%s")
            params.append(person_type.value)
        status_values = [s.value for s in statuses] if statuses is not None else []
        if status_values:
            clauses.append(f"status IN ({in_clause(status_values)})")
            params.extend(status_values)
        if class_id is not None:
            clauses.append("class_id=%s")
            params.append(int(class_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM enrollments
                WHERE {' AND '.join(clauses)}
                ORDER BY class_id ASC, person_id ASC, start_date ASC
                """,
                tuple(params),
            )
            return [_row_to_enrollment(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        person_id: int,
        person_type: PersonType,
        class_id: int,
        status: EnrollmentStatus,
        start_date: date,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO enrollments(person_id, person_type, class_id, status, start_date)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(person_id), person_type.value, int(class_id), status.value, start_date),
            )
            return int(cur.lastrowid)

    def update_status(
        self,
        *,
        enrollment_id: int,
        status: EnrollmentStatus,
        end_date: Optional[date] = None,
        leave_reason: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE enrollments
                SET status=%s, end_date=COALESCE(%s, end_date), leave_reason=COALESCE(%s, leave_reason)
                WHERE enrollment_id=%s
                """,
                (status.value, end_date, leave_reason, int(enrollment_id)),
            )
            return cur.rowcount > 0
