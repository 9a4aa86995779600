from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import PersonType
from .model import AttendanceFilters, AttendanceKey, AttendanceRecord


class AttendanceRepository(Protocol):
    def get(self, key: AttendanceKey) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def upsert(self, record: AttendanceRecord) -> AttendanceRecord:
        """Insert or overwrite the row at `record.key`; returns the stored row.

        A `None` note keeps the note already stored at that key.
        """

        raise NotImplementedError

    def list_by_class_date(
        self, *, class_id: int, attendance_date: date, person_type: Optional[PersonType] = None
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_range(
        self, *, start: date, end: date, filters: Optional[AttendanceFilters] = None
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError
