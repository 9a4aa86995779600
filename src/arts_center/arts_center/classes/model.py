from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from typing import Iterable, Optional

from ..common.datetime_utils import parse_hhmm, period_for_start_time
from ..common.validators import require_period
from ..core.enums import TimePeriod
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class ScheduleSlot:
    """Một khung giờ cố định trong tuần: (thứ, buổi)."""

    day_of_week: int  # 0 = Chủ nhật ... 6 = Thứ 7
    period: TimePeriod
    start_time: Optional[time] = None

    @property
    def sort_key(self) -> tuple[int, int]:
        return self.day_of_week, self.period.rank


@dataclass(frozen=True)
class ClassSchedule:
    """Thực thể miền (domain): Lớp học cùng lịch học cố định hằng tuần."""

    class_id: int
    name: str
    subject: str
    slots: tuple[ScheduleSlot, ...] = ()
    monthly_fee: int = 0
    salary_per_session: int = 0
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_active: bool = True

    def slots_on(self, day_of_week: int) -> list[ScheduleSlot]:
        found = [s for s in self.slots if s.day_of_week == day_of_week]
        found.sort(key=lambda s: s.period.rank)
        return found

    def runs_on(self, d: date) -> bool:
        if self.start_date and d < self.start_date:
            return False
        if self.end_date and d > self.end_date:
            return False
        return True

    def clip(self, start: date, end: date) -> tuple[date, date]:
        """[start, end] narrowed to the class's own dates; empty when start > end."""

        if self.start_date and self.start_date > start:
            start = self.start_date
        if self.end_date and self.end_date < end:
            end = self.end_date
        return start, end


@dataclass(frozen=True)
class Session:
    """Buổi học cụ thể (suy ra từ lịch, không lưu trong CSDL)."""

    class_id: int
    session_date: date
    period: TimePeriod
    start_time: Optional[time] = None


def build_slots(items: Iterable[dict]) -> tuple[ScheduleSlot, ...]:
    """Parse the stored `weekly_schedule` JSON list into a de-duplicated slot set.

    Each item is `{"day": 0-6, "period": "morning"|..., "start_time": "HH:MM"}`;
    `period` may be omitted when `start_time` is present.
    """

    seen: dict[tuple[int, object], ScheduleSlot] = {}
    for item in items or []:
        try:
            day = int(item.get("day", item.get("day_of_week")))
        except (TypeError, ValueError):
            raise ValidationError(f"Thứ trong tuần không hợp lệ: {item!r}")
        if not 0 <= day <= 6:
            raise ValidationError(f"Thứ trong tuần không hợp lệ: {day}")

        raw_start = item.get("start_time")
        start = parse_hhmm(raw_start) if raw_start else None

        raw_period = item.get("period")
        if raw_period:
            period = require_period(raw_period)
        elif start is not None:
            period = period_for_start_time(start)
        else:
            raise ValidationError(f"Thiếu buổi học cho thứ {day}")

        seen.setdefault((day, period), ScheduleSlot(day_of_week=day, period=period, start_time=start))

    return tuple(sorted(seen.values(), key=lambda s: s.sort_key))


def slots_to_json(slots: Iterable[ScheduleSlot]) -> list[dict]:
    out = []
    for s in slots:
        item = {"day": s.day_of_week, "period": s.period.value}
        if s.start_time is not None:
            item["start_time"] = s.start_time.strftime("%H:%M")
        out.append(item)
    return out
