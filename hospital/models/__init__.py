from .user import User
from .doctor import Doctor
from .patient import Patient
from .receptionist import Receptionist
from .schedule import DoctorSchedule, DayOfWeek
from .appointment import Appointment, AppointmentStatus

__all__ = [
    "User",
    "Doctor",
    "Patient",
    "Receptionist",
    "DoctorSchedule",
    "DayOfWeek",
    "Appointment",
    "AppointmentStatus",
]
