from datetime import date
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional

from ...core.database import get_db
from ...core.security import UserRole, AuthorizationError
from ...api.deps import get_current_user, get_front_desk_user
from ...models.user import User
from ...models.appointment import Appointment, AppointmentStatus
from ...services.booking_service import BookingService
from ...services.appointment_service import AppointmentService
from ...schemas.appointment import (
    AppointmentCreate, AppointmentCreated, AppointmentResponse, AppointmentStatusUpdate
)

router = APIRouter(prefix="/appointments", tags=["Appointments"])

def _own_patient_id(user: User) -> int:
    if not user.patient:
        raise AuthorizationError("No patient profile for this account")
    return user.patient.id

def _check_access(user: User, appointment: Appointment) -> None:
    """Patients may only see and touch their own appointments."""
    if user.role == UserRole.PATIENT and appointment.patient_id != _own_patient_id(user):
        raise AuthorizationError("You can only access your own appointments")

@router.get("", response_model=List[AppointmentResponse])
async def list_appointments(
    doctor_id: Optional[int] = None,
    patient_id: Optional[int] = None,
    appointment_date: Optional[date] = Query(None, alias="date"),
    status_filter: Optional[str] = Query(None, alias="status"),
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """List appointments ordered by date and time, optionally filtered."""
    if current_user.role == UserRole.PATIENT:
        patient_id = _own_patient_id(current_user)

    appointments = AppointmentService(db).list_appointments(
        doctor_id=doctor_id,
        patient_id=patient_id,
        appointment_date=appointment_date,
        status=status_filter,
        skip=skip,
        limit=limit,
    )
    return [AppointmentResponse.from_appointment(a) for a in appointments]

@router.get("/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(
    appointment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get a single appointment."""
    appointment = AppointmentService(db).get_appointment(appointment_id)
    _check_access(current_user, appointment)
    return AppointmentResponse.from_appointment(appointment)

@router.post("", response_model=AppointmentCreated, status_code=status.HTTP_201_CREATED)
async def create_appointment(
    booking: AppointmentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Book an appointment after validating it against the doctor's schedule."""
    if current_user.role == UserRole.PATIENT and booking.patient_id != _own_patient_id(current_user):
        raise AuthorizationError("Patients can only book appointments for themselves")

    appointment = BookingService(db).validate_and_create_booking(
        patient_id=booking.patient_id,
        doctor_id=booking.doctor_id,
        appointment_date=booking.appointment_date,
        appointment_time=booking.appointment_time,
        reason=booking.reason,
    )
    return AppointmentCreated(id=appointment.id, status=appointment.status.value)

@router.patch("/{appointment_id}/status", response_model=AppointmentResponse)
async def update_appointment_status(
    appointment_id: int,
    update: AppointmentStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Move an appointment through its status workflow."""
    service = AppointmentService(db)

    if current_user.role == UserRole.PATIENT:
        _check_access(current_user, service.get_appointment(appointment_id))
        if update.status != AppointmentStatus.CANCELLED.value:
            raise AuthorizationError("Patients can only cancel appointments")

    appointment = service.update_status(appointment_id, update.status, update.notes)
    return AppointmentResponse.from_appointment(appointment)

@router.delete("/{appointment_id}")
async def delete_appointment(
    appointment_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(get_front_desk_user)
):
    """Delete an appointment (admin and reception only)."""
    AppointmentService(db).delete_appointment(appointment_id)
    return {"message": "Appointment deleted successfully"}
