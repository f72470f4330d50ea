from datetime import date, datetime, time, timedelta

import pytest

from medagenda.models.timeplan import DayOfWeek
from medagenda.scheduling.recurrence import expand_day, weekday_of
from medagenda.scheduling.slots import generate_slots, iterate_window_slots
from medagenda.scheduling.snapshots import TimeplanDay, TimeWindow

MONDAY = date(2030, 1, 7)


def window(start: time, end: time, consultation_type_ids=(), is_active: bool = True) -> TimeWindow:
    return TimeWindow(
        start_time=start,
        end_time=end,
        is_active=is_active,
        consultation_type_ids=frozenset(consultation_type_ids),
    )


def test_weekday_of_maps_calendar_dates() -> None:
    assert weekday_of(MONDAY) == DayOfWeek.MONDAY
    assert weekday_of(date(2030, 1, 13)) == DayOfWeek.SUNDAY


def test_expand_day_returns_nothing_for_missing_or_inactive_day() -> None:
    inactive = TimeplanDay(day_of_week=DayOfWeek.MONDAY, is_active=False, windows=(window(time(9), time(12)),))

    assert expand_day(None) == []
    assert expand_day(inactive) == []


def test_expand_day_orders_windows_and_drops_inactive_ones() -> None:
    afternoon = window(time(14), time(17))
    morning = window(time(9), time(12))
    closed = window(time(12), time(13), is_active=False)
    day = TimeplanDay(day_of_week=DayOfWeek.MONDAY, windows=(afternoon, closed, morning))

    assert expand_day(day) == [morning, afternoon]


def test_expand_day_filters_by_consultation_type() -> None:
    general = window(time(9), time(12), consultation_type_ids={1})
    online = window(time(14), time(17), consultation_type_ids={2})
    day = TimeplanDay(day_of_week=DayOfWeek.MONDAY, windows=(general, online))

    assert expand_day(day, 2) == [online]
    assert expand_day(day, 3) == []
    assert expand_day(day) == [general, online]


def test_iterate_window_slots_fills_window_exactly() -> None:
    slots = iterate_window_slots(MONDAY, window(time(9), time(12)), 30)

    assert [start.time() for start, _ in slots] == [
        time(9, 0), time(9, 30), time(10, 0), time(10, 30), time(11, 0), time(11, 30),
    ]
    assert slots[-1][1] == datetime(2030, 1, 7, 12, 0)


def test_iterate_window_slots_never_overflows_window() -> None:
    slots = iterate_window_slots(MONDAY, window(time(9), time(10)), 40, rest_after_minutes=10)

    assert slots == [(datetime(2030, 1, 7, 9, 0), datetime(2030, 1, 7, 9, 40))]


def test_iterate_window_slots_steps_by_duration_plus_rest() -> None:
    slots = iterate_window_slots(MONDAY, window(time(9), time(12)), 20, rest_after_minutes=10)

    for start, end in slots:
        assert end - start == timedelta(minutes=20)
        assert end <= datetime(2030, 1, 7, 12, 0)
    for (previous_start, _), (next_start, _) in zip(slots, slots[1:]):
        assert next_start - previous_start == timedelta(minutes=30)
    assert len(slots) == 6


def test_iterate_window_slots_rejects_non_positive_duration() -> None:
    with pytest.raises(ValueError):
        iterate_window_slots(MONDAY, window(time(9), time(12)), 0)


def test_generate_slots_skips_overlap_between_windows() -> None:
    slots = generate_slots(MONDAY, [window(time(9), time(10)), window(time(9, 30), time(11))], 30)

    assert [start.time() for start, _ in slots] == [time(9, 0), time(9, 30), time(10, 0), time(10, 30)]


def test_generate_slots_orders_slots_across_windows() -> None:
    slots = generate_slots(MONDAY, [window(time(14), time(15)), window(time(9), time(10))], 30)

    assert [start.time() for start, _ in slots] == [time(9, 0), time(9, 30), time(14, 0), time(14, 30)]
