from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import ClassSchedule


class ClassRepository(Protocol):
    """Read-only access to classes; CRUD belongs to the admin workflow."""

    def get_by_id(self, class_id: int) -> Optional[ClassSchedule]:
        raise NotImplementedError

    def list_all(self, *, active_only: bool = False) -> Sequence[ClassSchedule]:
        raise NotImplementedError

    def list_teacher_ids(self, class_id: int) -> Sequence[int]:
        raise NotImplementedError

    def list_class_ids_for_teacher(self, teacher_id: int) -> Sequence[int]:
        raise NotImplementedError
