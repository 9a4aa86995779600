from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ..core.enums import PersonType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import Person
from .repository import PersonRepository

_TABLES = {
    PersonType.STUDENT: "students",
    PersonType.TEACHER: "teachers",
}


class MySQLPersonRepository(PersonRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_person(person_type: PersonType, r: dict) -> Person:
        return Person(
            person_id=int(r["person_id"]),
            person_type=person_type,
            full_name=r["full_name"],
            phone=r.get("phone"),
            is_active=bool(r.get("is_active", 1)),
        )

    def get_by_id(self, person_type: PersonType, person_id: int) -> Optional[Person]:
        table = _TABLES[person_type]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT person_id, full_name, phone, is_active FROM {table} WHERE person_id=%s",
                (int(person_id),),
            )
            r = fetchone(cur)
            return self._to_person(person_type, r) if r else None

    def list_all(self, person_type: PersonType, *, active_only: bool = False) -> Sequence[Person]:
        table = _TABLES[person_type]
        where = "WHERE is_active=1" if active_only else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT person_id, full_name, phone, is_active FROM {table} {where} ORDER BY full_name ASC")
            return [self._to_person(person_type, r) for r in fetchall(cur)]

    def list_by_ids(self, person_type: PersonType, person_ids: Iterable[int]) -> Sequence[Person]:
        ids = [int(i) for i in person_ids]
        if not ids:
            return []
        table = _TABLES[person_type]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT person_id, full_name, phone, is_active
                FROM {table}
                WHERE person_id IN ({in_clause(ids)})
                ORDER BY full_name ASC
                """,
                tuple(ids),
            )
            return [self._to_person(person_type, r) for r in fetchall(cur)]
