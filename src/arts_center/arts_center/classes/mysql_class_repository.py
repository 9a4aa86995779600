from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, db_cursor, fetchall, fetchone, load_json
from .model import ClassSchedule, build_slots
from .repository import ClassRepository

_COLUMNS = """
    class_id, name, subject, weekly_schedule, monthly_fee, salary_per_session,
    start_date, end_date, is_active
"""


def _row_to_class(r: dict) -> ClassSchedule:
    return ClassSchedule(
        class_id=int(r["class_id"]),
        name=r["name"],
        subject=r["subject"],
        slots=build_slots(load_json(r.get("weekly_schedule")) or []),
        monthly_fee=int(r.get("monthly_fee") or 0),
        salary_per_session=int(r.get("salary_per_session") or 0),
        start_date=as_date(r.get("start_date")),
        end_date=as_date(r.get("end_date")),
        is_active=bool(r.get("is_active", 1)),
    )


class MySQLClassRepository(ClassRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, class_id: int) -> Optional[ClassSchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM classes WHERE class_id=%s", (int(class_id),))
            r = fetchone(cur)
            return _row_to_class(r) if r else None

    def list_all(self, *, active_only: bool = False) -> Sequence[ClassSchedule]:
        where = "WHERE is_active=1" if active_only else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM classes {where} ORDER BY name ASC")
            return [_row_to_class(r) for r in fetchall(cur)]

    def list_teacher_ids(self, class_id: int) -> Sequence[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT teacher_id FROM class_teachers WHERE class_id=%s", (int(class_id),))
            return [int(r["teacher_id"]) for r in fetchall(cur)]

    def list_class_ids_for_teacher(self, teacher_id: int) -> Sequence[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT class_id FROM class_teachers WHERE teacher_id=%s", (int(teacher_id),))
            return [int(r["class_id"]) for r in fetchall(cur)]
