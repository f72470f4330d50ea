"""
Recurrence expansion: turns the doctor's "normal week" into the candidate
windows of one calendar date. Calendar anomalies (events, time off) are not
handled here; exclusion subtracts them later.
"""

from datetime import date

from medagenda.models.timeplan import DayOfWeek
from medagenda.scheduling.snapshots import TimeplanDay, TimeWindow


def weekday_of(target_date: date) -> DayOfWeek:
    return DayOfWeek.from_date(target_date)


def expand_day(timeplan_day: TimeplanDay | None, consultation_type_id: int | None = None) -> list[TimeWindow]:
    """
    Candidate windows for one day, ordered by start time.

    An absent or inactive day yields no windows. Inactive windows are dropped,
    and when a consultation type is requested only the windows that allow it
    survive.
    """
    if timeplan_day is None or not timeplan_day.is_active:
        return []

    windows = [
        window
        for window in timeplan_day.windows
        if window.is_active and window.start_time < window.end_time and window.allows(consultation_type_id)
    ]
    windows.sort(key=lambda window: (window.start_time, window.end_time))
    return windows
