from datetime import date
from typing import Optional
from pydantic import BaseModel


class DoctorResponse(BaseModel):
    id: int
    user_id: int
    first_name: str
    last_name: str
    specialization: Optional[str] = None
    qualification: Optional[str] = None
    phone: Optional[str] = None

    class Config:
        from_attributes = True


class PatientResponse(BaseModel):
    id: int
    user_id: int
    first_name: str
    last_name: str
    phone: Optional[str] = None
    date_of_birth: Optional[date] = None
    blood_group: Optional[str] = None
    address: Optional[str] = None

    class Config:
        from_attributes = True


class ReceptionistResponse(BaseModel):
    id: int
    user_id: int
    first_name: str
    last_name: str
    phone: Optional[str] = None

    class Config:
        from_attributes = True
