from datetime import date
from typing import List, Optional
from sqlalchemy.orm import Session, joinedload
import logging

from ..models.appointment import Appointment, AppointmentStatus
from ..core.exceptions import AppointmentNotFound, InvalidStatus, InvalidTransition

logger = logging.getLogger(__name__)

# Every status other than scheduled is terminal
ALLOWED_TRANSITIONS = {
    AppointmentStatus.SCHEDULED: frozenset({
        AppointmentStatus.COMPLETED,
        AppointmentStatus.CANCELLED,
        AppointmentStatus.NO_SHOW,
    }),
    AppointmentStatus.COMPLETED: frozenset(),
    AppointmentStatus.CANCELLED: frozenset(),
    AppointmentStatus.NO_SHOW: frozenset(),
}


def parse_status(value: str) -> AppointmentStatus:
    try:
        return AppointmentStatus(value)
    except ValueError:
        raise InvalidStatus(
            f"Invalid status value '{value}'. "
            f"Expected one of: {', '.join(s.value for s in AppointmentStatus)}"
        ) from None


def can_transition(current: AppointmentStatus, new: AppointmentStatus) -> bool:
    return new in ALLOWED_TRANSITIONS[current]


class AppointmentService:
    def __init__(self, db: Session):
        self.db = db

    def list_appointments(
        self,
        doctor_id: Optional[int] = None,
        patient_id: Optional[int] = None,
        appointment_date: Optional[date] = None,
        status: Optional[str] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Appointment]:
        query = self.db.query(Appointment).options(
            joinedload(Appointment.doctor), joinedload(Appointment.patient)
        )

        if doctor_id is not None:
            query = query.filter(Appointment.doctor_id == doctor_id)
        if patient_id is not None:
            query = query.filter(Appointment.patient_id == patient_id)
        if appointment_date is not None:
            query = query.filter(Appointment.appointment_date == appointment_date)
        if status is not None:
            query = query.filter(Appointment.status == parse_status(status))

        return query.order_by(
            Appointment.appointment_date, Appointment.appointment_time
        ).offset(skip).limit(limit).all()

    def get_appointment(self, appointment_id: int) -> Appointment:
        appointment = self.db.query(Appointment).filter(Appointment.id == appointment_id).first()
        if not appointment:
            raise AppointmentNotFound()
        return appointment

    def update_status(self, appointment_id: int, new_status: str, notes: Optional[str] = None) -> Appointment:
        """
        Move an appointment to ``new_status``.

        Only scheduled appointments may change; completed, cancelled and
        no-show are final. Supplied notes replace the stored notes.
        """
        target = parse_status(new_status)
        appointment = self.get_appointment(appointment_id)
        current = appointment.status

        if not can_transition(current, target):
            raise InvalidTransition(
                f"Cannot change appointment status from '{current.value}' to '{target.value}'"
            )

        appointment.status = target
        if notes is not None:
            appointment.notes = notes

        self.db.commit()
        self.db.refresh(appointment)

        logger.info(f"Appointment {appointment.id}: {current.value} -> {target.value}")
        return appointment

    def delete_appointment(self, appointment_id: int) -> None:
        appointment = self.get_appointment(appointment_id)
        self.db.delete(appointment)
        self.db.commit()
        logger.info(f"Deleted appointment {appointment_id}")
