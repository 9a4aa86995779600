from __future__ import annotations

from datetime import date

from ..classes.model import ClassSchedule, Session
from ..classes.repository import ClassRepository
from ..core.constants import DAY_LABELS
from ..core.exceptions import NotFoundError
from .resolver import ScheduleResolver


class ScheduleService:
    def __init__(self, classes: ClassRepository, resolver: ScheduleResolver | None = None):
        self._classes = classes
        self._resolver = resolver or ScheduleResolver()

    @property
    def resolver(self) -> ScheduleResolver:
        return self._resolver

    def get_class(self, class_id: int) -> ClassSchedule:
        schedule = self._classes.get_by_id(int(class_id))
        if not schedule:
            raise NotFoundError(f"Lớp học {class_id} không tồn tại")
        return schedule

    def resolve_sessions(self, class_id: int, start: date, end: date) -> list[Session]:
        return self._resolver.resolve_sessions(self.get_class(class_id), start, end)

    def sessions_for_date(self, class_id: int, on_date: date) -> list[Session]:
        return self._resolver.sessions_on(self.get_class(class_id), on_date)

    def weekly_overview(self, class_id: int) -> list[dict]:
        """Lịch tuần cho UI, bắt đầu từ Thứ 2 và kết thúc ở Chủ nhật."""

        schedule = self.get_class(class_id)
        out: list[dict] = []
        for day in (1, 2, 3, 4, 5, 6, 0):
            slots = schedule.slots_on(day)
            if not slots:
                continue
            out.append(
                {
                    "day": day,
                    "label": DAY_LABELS[day],
                    "periods": [
                        {
                            "period": s.period.value,
                            "label": s.period.label,
                            "start_time": s.start_time.strftime("%H:%M") if s.start_time else None,
                        }
                        for s in slots
                    ],
                }
            )
        return out
