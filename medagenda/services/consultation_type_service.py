"""Consultation type service - bookable services of a doctor."""

import logging

from sqlalchemy.orm import Session

from medagenda.core.errors import DuplicateRecord, RecordNotFound
from medagenda.models.consultation_type import ConsultationKind, ConsultationLocation, ConsultationType
from medagenda.schemas.common import updated_fields
from medagenda.schemas.consultation_type import ConsultationTypeCreate, ConsultationTypeUpdate

logger = logging.getLogger(__name__)

DEFAULT_CONSULTATION_TYPES = [
    ConsultationTypeCreate(
        name='General Consultation',
        color='#3B82F6',
        location=ConsultationLocation.ONSITE,
        duration=30,
        rest_after=10,
        kind=ConsultationKind.REGULAR,
        can_book_before=1440,
        price=50.0,
    ),
    ConsultationTypeCreate(
        name='Online Consultation',
        color='#10B981',
        location=ConsultationLocation.ONLINE,
        duration=20,
        rest_after=5,
        kind=ConsultationKind.REGULAR,
        can_book_before=720,
        price=30.0,
    ),
    ConsultationTypeCreate(
        name='Emergency Visit',
        color='#EF4444',
        location=ConsultationLocation.ATHOME,
        duration=45,
        rest_after=15,
        kind=ConsultationKind.URGENT,
        can_book_before=60,
        price=100.0,
    ),
]


class ConsultationTypeService:
    def __init__(self, db: Session):
        self.db = db

    def list_consultation_types(
        self,
        doctor_id: int,
        enabled_only: bool = False,
        location: ConsultationLocation | None = None,
    ) -> list[ConsultationType]:
        query = self.db.query(ConsultationType).filter(ConsultationType.doctor_id == doctor_id)

        if enabled_only:
            query = query.filter(ConsultationType.enabled.is_(True))

        if location is not None:
            query = query.filter(ConsultationType.location == location)

        return query.order_by(ConsultationType.name.asc()).all()

    def get_consultation_type(self, doctor_id: int, consultation_type_id: int) -> ConsultationType:
        consultation_type = self.db.query(ConsultationType).filter(
            ConsultationType.id == consultation_type_id,
            ConsultationType.doctor_id == doctor_id,
        ).first()
        if consultation_type is None:
            raise RecordNotFound('Consultation type not found.')
        return consultation_type

    def create_consultation_type(self, doctor_id: int, data: ConsultationTypeCreate) -> ConsultationType:
        self._ensure_unique_name(doctor_id, data.name)

        consultation_type = ConsultationType(doctor_id=doctor_id, **data.model_dump())
        self.db.add(consultation_type)
        self.db.commit()
        self.db.refresh(consultation_type)

        logger.info('Consultation type %s (%s) created for doctor %s', consultation_type.id, data.name, doctor_id)
        return consultation_type

    def update_consultation_type(
        self,
        doctor_id: int,
        consultation_type_id: int,
        data: ConsultationTypeUpdate,
    ) -> ConsultationType:
        consultation_type = self.get_consultation_type(doctor_id, consultation_type_id)
        changes = {field: value for field, value in updated_fields(data).items() if value is not None}

        if 'name' in changes and changes['name'] != consultation_type.name:
            self._ensure_unique_name(doctor_id, changes['name'], exclude_id=consultation_type.id)

        for field, value in changes.items():
            setattr(consultation_type, field, value)

        self.db.commit()
        self.db.refresh(consultation_type)
        return consultation_type

    def delete_consultation_type(self, doctor_id: int, consultation_type_id: int) -> None:
        consultation_type = self.get_consultation_type(doctor_id, consultation_type_id)
        self.db.delete(consultation_type)
        self.db.commit()
        logger.info('Consultation type %s deleted for doctor %s', consultation_type_id, doctor_id)

    def create_default_consultation_types(self, doctor_id: int) -> list[ConsultationType]:
        created = [
            ConsultationType(doctor_id=doctor_id, **template.model_dump())
            for template in DEFAULT_CONSULTATION_TYPES
            if not self._name_taken(doctor_id, template.name)
        ]
        self.db.add_all(created)
        self.db.commit()
        for consultation_type in created:
            self.db.refresh(consultation_type)
        return created

    def _name_taken(self, doctor_id: int, name: str, exclude_id: int | None = None) -> bool:
        query = self.db.query(ConsultationType.id).filter(
            ConsultationType.doctor_id == doctor_id,
            ConsultationType.name == name,
        )
        if exclude_id is not None:
            query = query.filter(ConsultationType.id != exclude_id)
        return query.first() is not None

    def _ensure_unique_name(self, doctor_id: int, name: str, exclude_id: int | None = None) -> None:
        if self._name_taken(doctor_id, name, exclude_id):
            raise DuplicateRecord('Consultation type with this name already exists.')
