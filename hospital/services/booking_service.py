from datetime import date, time
from typing import Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
import logging

from ..models.doctor import Doctor
from ..models.patient import Patient
from ..models.schedule import DoctorSchedule, DayOfWeek
from ..models.appointment import Appointment, AppointmentStatus
from ..core.exceptions import (
    DoctorNotFound, PatientNotFound, DoctorUnavailableThisDay,
    OutsideWorkingHours, SlotAlreadyBooked
)

logger = logging.getLogger(__name__)


def wall_clock(value: time) -> time:
    """Drop any timezone so times compare as plain HH:MM:SS values."""
    return value.replace(tzinfo=None)


class BookingService:
    def __init__(self, db: Session):
        self.db = db

    def validate_and_create_booking(
        self,
        patient_id: int,
        doctor_id: int,
        appointment_date: date,
        appointment_time: time,
        reason: Optional[str] = None,
    ) -> Appointment:
        """
        Book a slot after checking, in order: doctor, patient, the doctor's
        schedule for that weekday, the working-hours window and existing
        bookings. The first failing check decides the error.
        """
        appointment_time = wall_clock(appointment_time)

        doctor = self.db.query(Doctor).filter(Doctor.id == doctor_id).first()
        if not doctor:
            raise DoctorNotFound()

        patient = self.db.query(Patient).filter(Patient.id == patient_id).first()
        if not patient:
            raise PatientNotFound()

        day = DayOfWeek.for_date(appointment_date)
        schedule = self.db.query(DoctorSchedule).filter(
            DoctorSchedule.doctor_id == doctor_id,
            DoctorSchedule.day_of_week == day
        ).one_or_none()

        if schedule is None:
            raise DoctorUnavailableThisDay()

        if not schedule.covers(appointment_time):
            raise OutsideWorkingHours()

        if self._find_conflict(doctor_id, appointment_date, appointment_time):
            raise SlotAlreadyBooked()

        appointment = Appointment(
            patient_id=patient_id,
            doctor_id=doctor_id,
            appointment_date=appointment_date,
            appointment_time=appointment_time,
            reason=reason,
            status=AppointmentStatus.SCHEDULED,
        )

        try:
            self.db.add(appointment)
            self.db.commit()
        except IntegrityError:
            # The partial unique index caught a booking that slipped in after the check
            self.db.rollback()
            logger.warning(
                f"Concurrent booking for doctor {doctor_id} on {appointment_date} at {appointment_time}"
            )
            raise SlotAlreadyBooked()

        self.db.refresh(appointment)
        logger.info(
            f"Booked appointment {appointment.id}: patient {patient_id} with doctor "
            f"{doctor_id} on {appointment_date} ({day.value}) at {appointment_time}"
        )
        return appointment

    def _find_conflict(self, doctor_id: int, appointment_date: date, appointment_time: time) -> Optional[Appointment]:
        return self.db.query(Appointment).filter(
            Appointment.doctor_id == doctor_id,
            Appointment.appointment_date == appointment_date,
            Appointment.appointment_time == appointment_time,
            Appointment.status != AppointmentStatus.CANCELLED
        ).first()
