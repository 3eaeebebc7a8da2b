from datetime import date, datetime, time
from typing import Optional
from pydantic import BaseModel

from ..models.appointment import Appointment


class AppointmentCreate(BaseModel):
    patient_id: int
    doctor_id: int
    appointment_date: date
    appointment_time: time
    reason: Optional[str] = None


class AppointmentStatusUpdate(BaseModel):
    # Plain string so unknown values reach the workflow and come back as InvalidStatus
    status: str
    notes: Optional[str] = None


class AppointmentCreated(BaseModel):
    id: int
    status: str
    message: str = "Appointment created successfully"


class AppointmentResponse(BaseModel):
    id: int
    patient_id: int
    doctor_id: int
    appointment_date: date
    appointment_time: time
    status: str
    reason: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    doctor_first_name: Optional[str] = None
    doctor_last_name: Optional[str] = None
    specialization: Optional[str] = None
    patient_first_name: Optional[str] = None
    patient_last_name: Optional[str] = None

    @classmethod
    def from_appointment(cls, appointment: Appointment) -> "AppointmentResponse":
        doctor = appointment.doctor
        patient = appointment.patient
        return cls(
            id=appointment.id,
            patient_id=appointment.patient_id,
            doctor_id=appointment.doctor_id,
            appointment_date=appointment.appointment_date,
            appointment_time=appointment.appointment_time,
            status=appointment.status.value,
            reason=appointment.reason,
            notes=appointment.notes,
            created_at=appointment.created_at,
            updated_at=appointment.updated_at,
            doctor_first_name=doctor.first_name if doctor else None,
            doctor_last_name=doctor.last_name if doctor else None,
            specialization=doctor.specialization if doctor else None,
            patient_first_name=patient.first_name if patient else None,
            patient_last_name=patient.last_name if patient else None,
        )
