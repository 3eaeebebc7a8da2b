"""
Domain errors raised by the service layer.

Each error is an HTTPException carrying the status code it maps to and a
stable ``code`` so API clients can branch on the failure kind rather than
on the human-readable detail.
"""
from fastapi import HTTPException, status


class HospitalError(HTTPException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Request could not be processed"

    def __init__(self, detail: str = None, headers: dict = None):
        super().__init__(
            status_code=self.status_code,
            detail=detail or self.default_detail,
            headers=headers,
        )

    @property
    def code(self) -> str:
        return type(self).__name__


# Not found
class NotFoundError(HospitalError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Resource not found"

class DoctorNotFound(NotFoundError):
    default_detail = "Doctor not found"

class PatientNotFound(NotFoundError):
    default_detail = "Patient not found"

class AppointmentNotFound(NotFoundError):
    default_detail = "Appointment not found"

class UserNotFound(NotFoundError):
    default_detail = "User not found"


# Conflict
class ConflictError(HospitalError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflict"

class DuplicateUser(ConflictError):
    default_detail = "Username or email already exists"

class SlotAlreadyBooked(ConflictError):
    default_detail = "This time slot is already booked"

class InvalidTransition(ConflictError):
    default_detail = "Appointment status cannot be changed"


# Validation
class ValidationError(HospitalError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid request"

class InvalidStatus(ValidationError):
    default_detail = "Invalid status value"

class DoctorUnavailableThisDay(ValidationError):
    default_detail = "Doctor is not available on this day"

class OutsideWorkingHours(ValidationError):
    default_detail = "Appointment time is outside doctor's working hours"

class InvalidSchedule(ValidationError):
    default_detail = "Invalid schedule"


# Access
class TooManyRequests(HospitalError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    default_detail = "Too many requests. Please try again later."
