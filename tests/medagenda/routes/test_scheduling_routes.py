from datetime import date, datetime

import pytest
from fastapi import HTTPException

from medagenda.models.appointment import AppointmentStatus
from medagenda.models.event import EventType
from medagenda.models.timeplan import DayOfWeek
from medagenda.routes.appointment_routes import (
    book_appointment,
    cancel_appointment,
    list_appointments,
    list_upcoming_appointments,
    update_appointment,
    update_appointment_status,
)
from medagenda.routes.consultation_type_routes import (
    create_consultation_type,
    create_default_consultation_types,
    get_consultation_type,
)
from medagenda.routes.event_routes import create_event, list_events
from medagenda.routes.pto_routes import create_pto_period, get_pto_period
from medagenda.routes.timeplan_routes import get_doctor_timeplan_day, save_timeplan_day
from medagenda.schemas.appointment import AppointmentCreate, AppointmentStatusUpdate, AppointmentUpdate
from medagenda.schemas.consultation_type import ConsultationTypeCreate
from medagenda.schemas.event import EventCreate
from medagenda.schemas.pto import PTOCreate
from medagenda.schemas.timeplan import TimeplanDayCreate, TimeWindowInput


@pytest.fixture(autouse=True)
def skip_index_check(monkeypatch: pytest.MonkeyPatch) -> None:
    for module in ('appointment', 'consultation_type', 'event', 'pto', 'timeplan'):
        monkeypatch.setattr(f'medagenda.routes.{module}_routes.ensure_database_ready', lambda: None)


def test_save_timeplan_day_rejects_overlapping_windows(db, doctor) -> None:
    with pytest.raises(HTTPException) as exception_info:
        save_timeplan_day(
            data=TimeplanDayCreate(
                day_of_week=DayOfWeek.MONDAY,
                windows=[
                    TimeWindowInput(start_time='09:00', end_time='12:00'),
                    TimeWindowInput(start_time='10:00', end_time='11:00'),
                ],
            ),
            doctor=doctor,
            db=db,
        )

    assert exception_info.value.status_code == 400


def test_get_timeplan_day_missing_is_not_found(db, doctor) -> None:
    with pytest.raises(HTTPException) as exception_info:
        get_doctor_timeplan_day(day_of_week=DayOfWeek.SUNDAY, doctor=doctor, db=db)

    assert exception_info.value.status_code == 404
    assert exception_info.value.detail == 'Timeplan not found for this day.'


def test_create_consultation_type_duplicate_is_conflict(db, doctor) -> None:
    create_consultation_type(data=ConsultationTypeCreate(name='Visit', duration=30), doctor=doctor, db=db)

    with pytest.raises(HTTPException) as exception_info:
        create_consultation_type(data=ConsultationTypeCreate(name='Visit', duration=20), doctor=doctor, db=db)

    assert exception_info.value.status_code == 409


def test_default_consultation_types_route(db, doctor) -> None:
    created = create_default_consultation_types(doctor=doctor, db=db)

    assert {item.name for item in created} == {'General Consultation', 'Online Consultation', 'Emergency Visit'}


def test_get_consultation_type_of_other_doctor_is_not_found(db, doctor, other_doctor) -> None:
    created = create_consultation_type(data=ConsultationTypeCreate(name='Visit', duration=30), doctor=doctor, db=db)

    with pytest.raises(HTTPException) as exception_info:
        get_consultation_type(consultation_type_id=created.id, doctor=other_doctor, db=db)

    assert exception_info.value.status_code == 404


def test_create_pto_period_rejects_reversed_range(db, doctor) -> None:
    with pytest.raises(HTTPException) as exception_info:
        create_pto_period(
            data=PTOCreate(label='Holiday', start_date=date(2030, 1, 9), end_date=date(2030, 1, 7)),
            doctor=doctor,
            db=db,
        )

    assert exception_info.value.status_code == 400
    assert exception_info.value.detail == 'Start date must be before or equal to end date.'


def test_get_pto_period_missing_is_not_found(db, doctor) -> None:
    with pytest.raises(HTTPException) as exception_info:
        get_pto_period(pto_id=999, doctor=doctor, db=db)

    assert exception_info.value.status_code == 404


def test_list_events_filters_by_range(db, doctor) -> None:
    create_event(data=EventCreate(title='Monday', start_date=date(2030, 1, 7)), doctor=doctor, db=db)
    create_event(data=EventCreate(title='Later', start_date=date(2030, 2, 7)), doctor=doctor, db=db)

    everything = list_events(start_date=None, end_date=None, doctor=doctor, db=db)
    january = list_events(start_date=date(2030, 1, 1), end_date=date(2030, 1, 31), doctor=doctor, db=db)

    assert [event.title for event in everything] == ['Monday', 'Later']
    assert [event.title for event in january] == ['Monday']


def test_create_one_off_event_without_time_is_bad_request(db, doctor) -> None:
    with pytest.raises(HTTPException) as exception_info:
        create_event(
            data=EventCreate(title='Call', event_type=EventType.PONCTUEL, start_date=date(2030, 1, 7)),
            doctor=doctor,
            db=db,
        )

    assert exception_info.value.status_code == 400


def test_book_and_cancel_appointment(db, doctor) -> None:
    data = AppointmentCreate(start_time=datetime(2030, 1, 7, 9, 0), end_time=datetime(2030, 1, 7, 9, 30))
    appointment = book_appointment(data=data, doctor=doctor, db=db)

    with pytest.raises(HTTPException) as exception_info:
        book_appointment(data=data, doctor=doctor, db=db)
    assert exception_info.value.status_code == 409

    cancelled = cancel_appointment(appointment_id=appointment.id, doctor=doctor, db=db)

    assert cancelled.status == AppointmentStatus.CANCELLED
    assert list_appointments(date=date(2030, 1, 7), doctor=doctor, db=db) == []


def test_reschedule_route_maps_conflict_and_keeps_original(db, doctor) -> None:
    first = book_appointment(
        data=AppointmentCreate(start_time=datetime(2030, 1, 7, 9, 0), end_time=datetime(2030, 1, 7, 9, 30)),
        doctor=doctor,
        db=db,
    )
    book_appointment(
        data=AppointmentCreate(start_time=datetime(2030, 1, 7, 10, 0), end_time=datetime(2030, 1, 7, 10, 30)),
        doctor=doctor,
        db=db,
    )

    with pytest.raises(HTTPException) as exception_info:
        update_appointment(
            appointment_id=first.id,
            data=AppointmentUpdate(start_time=datetime(2030, 1, 7, 10, 0)),
            doctor=doctor,
            db=db,
        )
    assert exception_info.value.status_code == 409

    moved = update_appointment(
        appointment_id=first.id,
        data=AppointmentUpdate(start_time=datetime(2030, 1, 7, 11, 0)),
        doctor=doctor,
        db=db,
    )
    assert (moved.start_time, moved.end_time) == (datetime(2030, 1, 7, 11, 0), datetime(2030, 1, 7, 11, 30))


def test_status_route_refuses_to_revive_into_taken_slot(db, doctor) -> None:
    data = AppointmentCreate(start_time=datetime(2030, 1, 7, 9, 0), end_time=datetime(2030, 1, 7, 9, 30))
    first = book_appointment(data=data, doctor=doctor, db=db)
    cancel_appointment(appointment_id=first.id, doctor=doctor, db=db)
    book_appointment(data=data, doctor=doctor, db=db)

    with pytest.raises(HTTPException) as exception_info:
        update_appointment_status(
            appointment_id=first.id,
            data=AppointmentStatusUpdate(status=AppointmentStatus.SCHEDULED),
            doctor=doctor,
            db=db,
        )

    assert exception_info.value.status_code == 409


def test_upcoming_route_lists_next_appointments(db, doctor) -> None:
    booked = book_appointment(
        data=AppointmentCreate(start_time=datetime(2030, 1, 7, 9, 0), end_time=datetime(2030, 1, 7, 9, 30)),
        doctor=doctor,
        db=db,
    )

    assert [item.id for item in list_upcoming_appointments(limit=5, doctor=doctor, db=db)] == [booked.id]
