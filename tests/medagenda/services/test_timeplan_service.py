import pytest

from medagenda.core.errors import InvalidRange, InvalidReference, RecordNotFound
from medagenda.models.consultation_type import ConsultationType
from medagenda.models.timeplan import DayOfWeek, TimeplanWindow
from medagenda.schemas.timeplan import TimeplanDayCreate, TimeplanDayUpdate, TimeWindowInput
from medagenda.services.timeplan_service import TimeplanService, validate_windows


def test_validate_windows_accepts_touching_windows() -> None:
    validate_windows([
        TimeWindowInput(start_time='09:00', end_time='12:00'),
        TimeWindowInput(start_time='12:00', end_time='14:00'),
    ])


def test_validate_windows_rejects_reversed_window() -> None:
    with pytest.raises(InvalidRange):
        validate_windows([TimeWindowInput(start_time='12:00', end_time='09:00')])


def test_validate_windows_rejects_overlapping_active_windows() -> None:
    with pytest.raises(InvalidRange) as exception_info:
        validate_windows([
            TimeWindowInput(start_time='09:00', end_time='12:00'),
            TimeWindowInput(start_time='11:00', end_time='13:00'),
        ])

    assert exception_info.value.message == 'Windows overlap: 09:00-12:00 and 11:00-13:00.'


def test_validate_windows_ignores_inactive_overlap() -> None:
    validate_windows([
        TimeWindowInput(start_time='09:00', end_time='12:00'),
        TimeWindowInput(start_time='11:00', end_time='13:00', is_active=False),
    ])


def test_window_input_rejects_malformed_times() -> None:
    with pytest.raises(ValueError):
        TimeWindowInput(start_time='9am', end_time='12:00')


@pytest.fixture
def consultation_type(db, doctor) -> ConsultationType:
    record = ConsultationType(doctor_id=doctor.id, name='General', duration=30)
    db.add(record)
    db.commit()
    db.refresh(record)
    return record


def test_upsert_creates_then_replaces_day(db, doctor, consultation_type) -> None:
    service = TimeplanService(db)
    service.upsert_timeplan_day(doctor.id, TimeplanDayCreate(
        day_of_week=DayOfWeek.MONDAY,
        windows=[TimeWindowInput(start_time='09:00', end_time='12:00', consultation_type_ids=[consultation_type.id])],
    ))

    timeplan = service.upsert_timeplan_day(doctor.id, TimeplanDayCreate(
        day_of_week=DayOfWeek.MONDAY,
        windows=[TimeWindowInput(start_time='14:00', end_time='18:00')],
    ))

    assert [(window.start_time, window.end_time) for window in timeplan.windows] == [('14:00', '18:00')]
    assert db.query(TimeplanWindow).count() == 1
    assert len(service.get_timeplan(doctor.id)) == 1


def test_upsert_links_consultation_types(db, doctor, consultation_type) -> None:
    timeplan = TimeplanService(db).upsert_timeplan_day(doctor.id, TimeplanDayCreate(
        day_of_week=DayOfWeek.TUESDAY,
        windows=[TimeWindowInput(start_time='09:00', end_time='12:00', consultation_type_ids=[consultation_type.id])],
    ))

    assert timeplan.windows[0].consultation_type_ids == [consultation_type.id]


def test_upsert_rejects_consultation_type_of_other_doctor(db, doctor, other_doctor, consultation_type) -> None:
    with pytest.raises(InvalidReference):
        TimeplanService(db).upsert_timeplan_day(other_doctor.id, TimeplanDayCreate(
            day_of_week=DayOfWeek.MONDAY,
            windows=[TimeWindowInput(start_time='09:00', end_time='12:00', consultation_type_ids=[consultation_type.id])],
        ))


def test_upsert_rejects_unknown_doctor(db) -> None:
    with pytest.raises(InvalidReference):
        TimeplanService(db).upsert_timeplan_day(404, TimeplanDayCreate(day_of_week=DayOfWeek.MONDAY))


def test_get_timeplan_orders_days_of_week(db, doctor) -> None:
    service = TimeplanService(db)
    for day in (DayOfWeek.FRIDAY, DayOfWeek.MONDAY, DayOfWeek.WEDNESDAY):
        service.upsert_timeplan_day(doctor.id, TimeplanDayCreate(day_of_week=day))

    days = [timeplan.day_of_week for timeplan in service.get_timeplan(doctor.id)]

    assert days == [DayOfWeek.MONDAY, DayOfWeek.WEDNESDAY, DayOfWeek.FRIDAY]


def test_update_toggles_day_without_touching_windows(db, doctor) -> None:
    service = TimeplanService(db)
    service.upsert_timeplan_day(doctor.id, TimeplanDayCreate(
        day_of_week=DayOfWeek.MONDAY,
        windows=[TimeWindowInput(start_time='09:00', end_time='12:00')],
    ))

    timeplan = service.update_timeplan_day(doctor.id, DayOfWeek.MONDAY, TimeplanDayUpdate(is_active=False))

    assert timeplan.is_active is False
    assert len(timeplan.windows) == 1


def test_update_missing_day_is_not_found(db, doctor) -> None:
    with pytest.raises(RecordNotFound):
        TimeplanService(db).update_timeplan_day(doctor.id, DayOfWeek.SUNDAY, TimeplanDayUpdate(is_active=True))


def test_delete_window_only_for_owner(db, doctor, other_doctor) -> None:
    service = TimeplanService(db)
    timeplan = service.upsert_timeplan_day(doctor.id, TimeplanDayCreate(
        day_of_week=DayOfWeek.MONDAY,
        windows=[
            TimeWindowInput(start_time='09:00', end_time='12:00'),
            TimeWindowInput(start_time='14:00', end_time='17:00'),
        ],
    ))
    window_id = timeplan.windows[0].id

    with pytest.raises(RecordNotFound):
        service.delete_window(other_doctor.id, window_id)

    service.delete_window(doctor.id, window_id)

    assert [window.start_time for window in service.get_timeplan_day(doctor.id, DayOfWeek.MONDAY).windows] == ['14:00']


def test_delete_day_removes_windows(db, doctor) -> None:
    service = TimeplanService(db)
    service.upsert_timeplan_day(doctor.id, TimeplanDayCreate(
        day_of_week=DayOfWeek.MONDAY,
        windows=[TimeWindowInput(start_time='09:00', end_time='12:00')],
    ))

    service.delete_timeplan_day(doctor.id, DayOfWeek.MONDAY)

    assert service.get_timeplan(doctor.id) == []
    assert db.query(TimeplanWindow).count() == 0
