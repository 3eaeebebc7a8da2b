from typing import List
from sqlalchemy.orm import Session
import logging

from ..models.doctor import Doctor
from ..models.patient import Patient
from ..models.schedule import DoctorSchedule
from ..core.exceptions import DoctorNotFound, InvalidSchedule
from ..schemas.schedule import ScheduleEntry
from .booking_service import wall_clock

logger = logging.getLogger(__name__)

class ScheduleService:
    def __init__(self, db: Session):
        self.db = db

    def list_doctors(self, skip: int = 0, limit: int = 100) -> List[Doctor]:
        return self.db.query(Doctor).order_by(Doctor.last_name, Doctor.first_name).offset(skip).limit(limit).all()

    def list_patients(self, skip: int = 0, limit: int = 100) -> List[Patient]:
        return self.db.query(Patient).order_by(Patient.last_name, Patient.first_name).offset(skip).limit(limit).all()

    def get_doctor(self, doctor_id: int) -> Doctor:
        doctor = self.db.query(Doctor).filter(Doctor.id == doctor_id).first()
        if not doctor:
            raise DoctorNotFound()
        return doctor

    def get_schedule(self, doctor_id: int) -> List[DoctorSchedule]:
        doctor = self.get_doctor(doctor_id)
        return sorted(doctor.schedules, key=lambda entry: entry.day_of_week.position)

    def replace_schedule(self, doctor_id: int, entries: List[ScheduleEntry]) -> List[DoctorSchedule]:
        """Replace the doctor's whole week; at most one window per weekday."""
        doctor = self.get_doctor(doctor_id)

        windows = []
        seen = set()
        for entry in entries:
            start, end = wall_clock(entry.start_time), wall_clock(entry.end_time)

            if entry.day_of_week in seen:
                raise InvalidSchedule(f"Duplicate schedule entry for {entry.day_of_week.value}")
            seen.add(entry.day_of_week)

            if start > end:
                raise InvalidSchedule(
                    f"Start time {start} is after end time {end} on {entry.day_of_week.value}"
                )
            windows.append((entry.day_of_week, start, end))

        try:
            doctor.schedules.clear()
            # Deletes must reach the database before the unique (doctor, day) rows return
            self.db.flush()
            doctor.schedules.extend(
                DoctorSchedule(day_of_week=day, start_time=start, end_time=end)
                for day, start, end in windows
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.exception(f"Schedule update for doctor {doctor_id} rolled back")
            raise

        logger.info(f"Doctor {doctor_id} schedule set for {', '.join(sorted(d.value for d in seen)) or 'no days'}")
        return self.get_schedule(doctor_id)
