from datetime import date, datetime

import pytest

from medagenda.core.errors import InvalidRange, RecordNotFound
from medagenda.models.appointment import Appointment, AppointmentStatus
from medagenda.schemas.pto import PTOCreate, PTOUpdate
from medagenda.services.pto_service import PTOService


def add_appointment(db, doctor, start: datetime, status=AppointmentStatus.SCHEDULED, is_deleted=False) -> None:
    db.add(Appointment(
        doctor_id=doctor.id,
        start_time=start,
        end_time=start.replace(minute=30),
        status=status,
        is_deleted=is_deleted,
    ))
    db.commit()


def test_create_period_counts_affected_appointments(db, doctor) -> None:
    add_appointment(db, doctor, datetime(2030, 1, 7, 9, 0))
    add_appointment(db, doctor, datetime(2030, 1, 9, 16, 0), status=AppointmentStatus.CONFIRMED)
    add_appointment(db, doctor, datetime(2030, 1, 8, 9, 0), status=AppointmentStatus.CANCELLED)
    add_appointment(db, doctor, datetime(2030, 1, 8, 10, 0), status=AppointmentStatus.COMPLETED)
    add_appointment(db, doctor, datetime(2030, 1, 8, 11, 0), is_deleted=True)
    add_appointment(db, doctor, datetime(2030, 1, 10, 9, 0))

    period = PTOService(db).create_period(
        doctor.id,
        PTOCreate(label='Ski trip', start_date=date(2030, 1, 7), end_date=date(2030, 1, 9)),
    )

    assert period.appointments_count == 2
    assert period.announcements == 2


def test_create_period_rejects_reversed_range(db, doctor) -> None:
    with pytest.raises(InvalidRange):
        PTOService(db).create_period(
            doctor.id,
            PTOCreate(label='Oops', start_date=date(2030, 1, 9), end_date=date(2030, 1, 7)),
        )


def test_pto_label_is_required() -> None:
    with pytest.raises(ValueError):
        PTOCreate(label='   ', start_date=date(2030, 1, 7), end_date=date(2030, 1, 7))


def test_update_period_recomputes_count(db, doctor) -> None:
    service = PTOService(db)
    period = service.create_period(
        doctor.id,
        PTOCreate(label='Conference', start_date=date(2030, 1, 7), end_date=date(2030, 1, 7)),
    )
    add_appointment(db, doctor, datetime(2030, 1, 8, 9, 0))

    updated = service.update_period(doctor.id, period.id, PTOUpdate(end_date=date(2030, 1, 8)))

    assert updated.end_date == date(2030, 1, 8)
    assert updated.appointments_count == 1


def test_update_period_rejects_end_before_existing_start(db, doctor) -> None:
    service = PTOService(db)
    period = service.create_period(
        doctor.id,
        PTOCreate(label='Conference', start_date=date(2030, 1, 7), end_date=date(2030, 1, 8)),
    )

    with pytest.raises(InvalidRange):
        service.update_period(doctor.id, period.id, PTOUpdate(end_date=date(2030, 1, 6)))


def test_periods_are_scoped_to_doctor(db, doctor, other_doctor) -> None:
    service = PTOService(db)
    period = service.create_period(
        doctor.id,
        PTOCreate(label='Holiday', start_date=date(2030, 1, 7), end_date=date(2030, 1, 7)),
    )

    assert service.list_periods(other_doctor.id) == []
    with pytest.raises(RecordNotFound):
        service.get_period(other_doctor.id, period.id)


def test_is_date_blocked_accepts_dates_and_datetimes(db, doctor) -> None:
    service = PTOService(db)
    service.create_period(
        doctor.id,
        PTOCreate(label='Holiday', start_date=date(2030, 1, 7), end_date=date(2030, 1, 9)),
    )

    assert service.is_date_blocked(doctor.id, date(2030, 1, 9))
    assert service.is_date_blocked(doctor.id, datetime(2030, 1, 7, 23, 59))
    assert not service.is_date_blocked(doctor.id, date(2030, 1, 10))


def test_delete_period(db, doctor) -> None:
    service = PTOService(db)
    period = service.create_period(
        doctor.id,
        PTOCreate(label='Holiday', start_date=date(2030, 1, 7), end_date=date(2030, 1, 7)),
    )

    service.delete_period(doctor.id, period.id)

    assert service.list_periods(doctor.id) == []
