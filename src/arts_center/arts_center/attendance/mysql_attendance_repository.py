from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import MarkedBy, PersonType, TimePeriod
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, db_cursor, fetchall, fetchone
from .model import AttendanceFilters, AttendanceKey, AttendanceRecord, sort_key
from .repository import AttendanceRepository

_COLUMNS = "class_id, attendance_date, period, person_id, person_type, present, recorded_at, marked_by, note"


def _row_to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        class_id=int(r["class_id"]),
        attendance_date=as_date(r["attendance_date"]),
        period=TimePeriod(r["period"]),
        person_id=int(r["person_id"]),
        person_type=PersonType(r["person_type"]),
        present=bool(r["present"]),
        recorded_at=r["recorded_at"],
        marked_by=MarkedBy(r.get("marked_by") or MarkedBy.ADMIN.value),
        note=r.get("note"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, key: AttendanceKey) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE class_id=%s AND attendance_date=%s AND period=%s AND person_id=%s AND person_type=%s
                """,
                (key.class_id, key.attendance_date, key.period.value, key.person_id, key.person_type.value),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def upsert(self, record: AttendanceRecord) -> AttendanceRecord:
        # Last write wins: the unique key makes a concurrent second insert an update.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance(
                    class_id, attendance_date, period, person_id, person_type,
                    present, recorded_at, marked_by, note
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    present=VALUES(present),
                    recorded_at=VALUES(recorded_at),
                    marked_by=VALUES(marked_by),
                    note=COALESCE(VALUES(note), note)
                """,
                (
                    record.class_id,
                    record.attendance_date,
                    record.period.value,
                    record.person_id,
                    record.person_type.value,
                    1 if record.present else 0,
                    record.recorded_at,
                    record.marked_by.value,
                    record.note,
                ),
            )
        return self.get(record.key) or record

    def list_by_class_date(
        self, *, class_id: int, attendance_date: date, person_type: Optional[PersonType] = None
    ) -> Sequence[AttendanceRecord]:
        return self.list_range(
            start=attendance_date,
            end=attendance_date,
            filters=AttendanceFilters(class_id=int(class_id), person_type=person_type),
        )

    def list_range(
        self, *, start: date, end: date, filters: Optional[AttendanceFilters] = None
    ) -> Sequence[AttendanceRecord]:
        filters = filters or AttendanceFilters()
        clauses = ["attendance_date BETWEEN %s AND %s"]
        params: list[object] = [start, end]

        if filters.class_id is not None:
            clauses.append("class_id=%s")
            params.append(int(filters.class_id))
        if filters.person_id is not None:
            clauses.append("person_id=%s")
            params.append(int(filters.person_id))
        if filters.person_type is not None:
            clauses.append("person_type=%s")
            params.append(filters.person_type.value)
        if filters.period is not None:
            clauses.append("period=%s")
            params.append(filters.period.value)
        if filters.present is not None:
            clauses.append("present=%s")
            params.append(1 if filters.present else 0)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance WHERE {' AND '.join(clauses)}",
                tuple(params),
            )
            rows = [_row_to_record(r) for r in fetchall(cur)]

        # Period labels do not sort chronologically as strings.
        rows.sort(key=sort_key)
        return rows
