from __future__ import annotations

from datetime import date, time

import pytest

from src.arts_center.arts_center.classes.model import ScheduleSlot, build_slots
from src.arts_center.arts_center.common.datetime_utils import domain_weekday
from src.arts_center.arts_center.core.enums import TimePeriod
from src.arts_center.arts_center.core.exceptions import NotFoundError, ValidationError
from src.arts_center.arts_center.schedules.resolver import ScheduleResolver, expand_sessions


def test_domain_weekday_uses_sunday_zero():
    assert domain_weekday(date(2024, 1, 7)) == 0  # Chủ nhật
    assert domain_weekday(date(2024, 1, 1)) == 1  # Thứ 2
    assert domain_weekday(date(2024, 1, 6)) == 6  # Thứ 7


def test_monday_class_over_two_weeks_has_two_sessions(piano_class):
    sessions = ScheduleResolver().resolve_sessions(piano_class(), date(2024, 1, 1), date(2024, 1, 14))

    assert [s.session_date for s in sessions] == [date(2024, 1, 1), date(2024, 1, 8)]
    assert all(s.period == TimePeriod.MORNING for s in sessions)


def test_sessions_ordered_by_date_then_period_not_lexically(piano_class):
    # "afternoon" < "evening" < "morning" as strings; the real order is morning first.
    slots = (
        ScheduleSlot(day_of_week=3, period=TimePeriod.EVENING),
        ScheduleSlot(day_of_week=3, period=TimePeriod.MORNING),
        ScheduleSlot(day_of_week=3, period=TimePeriod.AFTERNOON),
        ScheduleSlot(day_of_week=2, period=TimePeriod.EVENING),
    )
    sessions = expand_sessions(piano_class(slots=slots), date(2024, 1, 1), date(2024, 1, 7))

    assert [(s.session_date, s.period) for s in sessions] == [
        (date(2024, 1, 2), TimePeriod.EVENING),
        (date(2024, 1, 3), TimePeriod.MORNING),
        (date(2024, 1, 3), TimePeriod.AFTERNOON),
        (date(2024, 1, 3), TimePeriod.EVENING),
    ]


def test_empty_weekly_schedule_yields_nothing(piano_class):
    assert expand_sessions(piano_class(slots=()), date(2024, 1, 1), date(2024, 12, 31)) == ()


def test_class_start_and_end_dates_bound_sessions(piano_class):
    schedule = piano_class(start_date=date(2024, 1, 5), end_date=date(2024, 1, 20))
    sessions = expand_sessions(schedule, date(2024, 1, 1), date(2024, 1, 31))

    assert [s.session_date for s in sessions] == [date(2024, 1, 8), date(2024, 1, 15)]


def test_reversed_range_is_rejected(piano_class):
    with pytest.raises(ValidationError):
        ScheduleResolver().resolve_sessions(piano_class(), date(2024, 1, 14), date(2024, 1, 1))


def test_resolver_caches_and_edited_schedule_is_new_key(piano_class):
    resolver = ScheduleResolver(cache_size=8)
    schedule = piano_class()

    resolver.resolve_sessions(schedule, date(2024, 1, 1), date(2024, 1, 31))
    resolver.resolve_sessions(schedule, date(2024, 1, 1), date(2024, 1, 31))
    assert resolver.cache_info().hits == 1

    edited = piano_class(slots=(ScheduleSlot(day_of_week=1, period=TimePeriod.MORNING, start_time=time(9, 0)),))
    sessions = resolver.resolve_sessions(edited, date(2024, 1, 1), date(2024, 1, 31))
    assert sessions[0].start_time == time(9, 0)
    assert resolver.cache_info().misses == 2


def test_is_scheduled(piano_class):
    resolver = ScheduleResolver()
    schedule = piano_class()

    assert resolver.is_scheduled(schedule, date(2024, 1, 8), TimePeriod.MORNING)
    assert not resolver.is_scheduled(schedule, date(2024, 1, 8), TimePeriod.EVENING)
    assert not resolver.is_scheduled(schedule, date(2024, 1, 9), TimePeriod.MORNING)


def test_build_slots_dedupes_and_infers_period():
    slots = build_slots(
        [
            {"day": 3, "start_time": "18:30"},
            {"day": 1, "period": "morning"},
            {"day": 1, "period": "MORNING"},
        ]
    )

    assert [(s.day_of_week, s.period) for s in slots] == [(1, TimePeriod.MORNING), (3, TimePeriod.EVENING)]
    assert slots[1].start_time == time(18, 30)


@pytest.mark.parametrize("item", [{"day": 7, "period": "morning"}, {"day": "x"}, {"day": 2}])
def test_build_slots_rejects_bad_items(item):
    with pytest.raises(ValidationError):
        build_slots([item])


def test_schedule_service_weekly_overview_starts_monday(classes_repo, schedule_service, piano_class):
    classes_repo.add(
        piano_class(
            slots=(
                ScheduleSlot(day_of_week=0, period=TimePeriod.MORNING),
                ScheduleSlot(day_of_week=1, period=TimePeriod.AFTERNOON, start_time=time(14, 0)),
            )
        )
    )

    overview = schedule_service.weekly_overview(1)

    assert [d["day"] for d in overview] == [1, 0]
    assert overview[0]["periods"] == [{"period": "afternoon", "label": "Chiều", "start_time": "14:00"}]


def test_schedule_service_unknown_class(schedule_service):
    with pytest.raises(NotFoundError):
        schedule_service.resolve_sessions(99, date(2024, 1, 1), date(2024, 1, 7))
