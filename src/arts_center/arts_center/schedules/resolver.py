from __future__ import annotations

from datetime import date
from functools import lru_cache

from ..classes.model import ClassSchedule, Session
from ..common.datetime_utils import domain_weekday, iter_dates
from ..common.validators import require_date, require_range
from ..core.constants import DEFAULT_SESSION_CACHE_SIZE
from ..core.enums import TimePeriod


def expand_sessions(schedule: ClassSchedule, start: date, end: date) -> tuple[Session, ...]:
    """Expand the weekly slot set into dated sessions for [start, end].

    Output is ordered by date, then by period rank (morning, afternoon, evening).
    Dates outside the class's own start/end dates produce nothing.
    """

    if not schedule.slots:
        return ()

    by_day: dict[int, list] = {}
    for slot in schedule.slots:
        by_day.setdefault(slot.day_of_week, []).append(slot)
    for slots in by_day.values():
        slots.sort(key=lambda s: s.period.rank)

    out: list[Session] = []
    for d in iter_dates(start, end):
        if not schedule.runs_on(d):
            continue
        for slot in by_day.get(domain_weekday(d), ()):
            out.append(
                Session(
                    class_id=schedule.class_id,
                    session_date=d,
                    period=slot.period,
                    start_time=slot.start_time,
                )
            )
    return tuple(out)


class ScheduleResolver:
    """Pure session expansion, memoized per (schedule, start, end).

    `ClassSchedule` is frozen and hashable, so an edited schedule is a new cache key.
    """

    def __init__(self, *, cache_size: int = DEFAULT_SESSION_CACHE_SIZE):
        if cache_size and cache_size > 0:
            self._expand = lru_cache(maxsize=cache_size)(expand_sessions)
        else:
            self._expand = expand_sessions

    def resolve_sessions(self, schedule: ClassSchedule, start: date, end: date) -> list[Session]:
        start, end = require_range(start, end)
        return list(self._expand(schedule, start, end))

    def sessions_on(self, schedule: ClassSchedule, on_date: date) -> list[Session]:
        on_date = require_date(on_date)
        return list(self._expand(schedule, on_date, on_date))

    def is_scheduled(self, schedule: ClassSchedule, on_date: date, period: TimePeriod) -> bool:
        return any(s.period == period for s in self.sessions_on(schedule, on_date))

    def cache_info(self):
        info = getattr(self._expand, "cache_info", None)
        return info() if info else None
