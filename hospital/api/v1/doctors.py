from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from ...core.database import get_db
from ...core.security import UserRole, AuthorizationError
from ...api.deps import get_current_user, get_staff_user
from ...models.user import User
from ...services.schedule_service import ScheduleService
from ...schemas.profile import DoctorResponse, PatientResponse
from ...schemas.schedule import ScheduleResponse, WeeklySchedule

router = APIRouter(tags=["Doctors & Patients"])

@router.get("/doctors", response_model=List[DoctorResponse])
async def list_doctors(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user)
):
    """List doctors."""
    return ScheduleService(db).list_doctors(skip=skip, limit=limit)

@router.get("/doctors/{doctor_id}/schedule", response_model=List[ScheduleResponse])
async def get_doctor_schedule(
    doctor_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user)
):
    """Weekly availability windows, Monday first."""
    return ScheduleService(db).get_schedule(doctor_id)

@router.put("/doctors/{doctor_id}/schedule", response_model=List[ScheduleResponse])
async def replace_doctor_schedule(
    doctor_id: int,
    schedule: WeeklySchedule,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Replace the weekly schedule (admin, or the doctor themselves)."""
    if current_user.role != UserRole.ADMIN:
        own = current_user.doctor
        if current_user.role != UserRole.DOCTOR or own is None or own.id != doctor_id:
            raise AuthorizationError("Only an admin or the doctor can change this schedule")

    return ScheduleService(db).replace_schedule(doctor_id, schedule.entries)

@router.get("/patients", response_model=List[PatientResponse])
async def list_patients(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    _: User = Depends(get_staff_user)
):
    """List patients (staff only)."""
    return ScheduleService(db).list_patients(skip=skip, limit=limit)
