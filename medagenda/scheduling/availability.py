"""
Availability Resolver

Computes the bookable slots of one doctor for one calendar date:
1. Recurrence expansion of the weekly timeplan into candidate windows
2. Slot generation sized by the consultation type (duration + rest buffer)
3. Exclusion against appointments, blocking events and time off
4. Assembly of the ordered {time, available} sequence

The resolver keeps no state between calls and performs no writes. Its output
is a hint: booking re-runs the conflict check inside its own transaction.
"""

import logging
from datetime import date, datetime
from typing import Callable

from medagenda.core import config
from medagenda.core.errors import InvalidReference
from medagenda.scheduling.exclusion import ExclusionSet
from medagenda.scheduling.recurrence import expand_day, weekday_of
from medagenda.scheduling.repository import AvailabilityRepository
from medagenda.scheduling.slots import generate_slots
from medagenda.scheduling.snapshots import AvailableSlots, ConsultationTypeRules, Slot

logger = logging.getLogger(__name__)


class AvailabilityResolver:
    def __init__(
        self,
        repository: AvailabilityRepository,
        clock: Callable[[], datetime] = datetime.now,
        default_slot_minutes: int | None = None,
    ):
        self.repository = repository
        self.clock = clock
        self.default_slot_minutes = default_slot_minutes or config.DEFAULT_SLOT_DURATION_MINUTES

    def compute_available_slots(
        self,
        doctor_id: int,
        target_date: date,
        consultation_type_id: int | None = None,
    ) -> AvailableSlots:
        """
        Ordered slots of target_date for the doctor.

        Without a consultation type every active window is used, slots last
        default_slot_minutes with no rest buffer and no lead time applies.

        Raises:
            InvalidReference: unknown doctor, or a consultation type that is
                unknown, disabled or owned by another doctor.
        """
        if not self.repository.doctor_exists(doctor_id):
            raise InvalidReference(f'Doctor {doctor_id} not found.')

        consultation_type = None
        if consultation_type_id is not None:
            consultation_type = self._resolve_consultation_type(doctor_id, consultation_type_id)

        # One snapshot of "now" for the whole computation.
        now = self.clock()

        timeplan_day = self.repository.get_timeplan_for_day(doctor_id, weekday_of(target_date))
        windows = expand_day(timeplan_day, consultation_type_id)
        if not windows:
            return AvailableSlots(date=target_date, consultation_type_id=consultation_type_id)

        if consultation_type is not None:
            duration, rest_after, lead_time = (
                consultation_type.duration,
                consultation_type.rest_after,
                consultation_type.can_book_before,
            )
        else:
            duration, rest_after, lead_time = self.default_slot_minutes, 0, 0

        generated = generate_slots(target_date, windows, duration, rest_after)
        if not generated:
            return AvailableSlots(date=target_date, consultation_type_id=consultation_type_id)

        exclusions = ExclusionSet(
            target_date,
            appointments=self.repository.get_active_appointments(doctor_id, target_date),
            events=self.repository.get_blocking_events(doctor_id, target_date),
            time_off=self.repository.get_pto_periods(doctor_id, target_date),
            now=now,
            lead_time_minutes=lead_time,
        )

        slots = tuple(
            Slot(start=slot_start, end=slot_end, available=exclusions.is_available(slot_start, slot_end))
            for slot_start, slot_end in generated
        )

        logger.debug(
            'Resolved %d slots (%d available) for doctor %s on %s',
            len(slots),
            sum(1 for slot in slots if slot.available),
            doctor_id,
            target_date.isoformat(),
        )

        return AvailableSlots(date=target_date, consultation_type_id=consultation_type_id, slots=slots)

    def _resolve_consultation_type(self, doctor_id: int, consultation_type_id: int) -> ConsultationTypeRules:
        consultation_type = self.repository.get_consultation_type(doctor_id, consultation_type_id)
        if consultation_type is None or consultation_type.doctor_id != doctor_id:
            raise InvalidReference('Consultation type not found.')
        if not consultation_type.enabled:
            raise InvalidReference('Consultation type is not available.')
        return consultation_type
