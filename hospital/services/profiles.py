"""
Role-specific satellite profiles.

Every role except admin owns exactly one profile row in its own table. The
variants below are the only place that knows which table a role writes to;
callers resolve the variant once with ``profile_for(role)`` and then call
``create``/``update``/``remove``/``serialize`` without re-checking the role.
"""
from typing import Any, Dict, Optional, Tuple
from sqlalchemy.orm import Session

from ..core.security import UserRole
from ..models.user import User
from ..models.doctor import Doctor
from ..models.patient import Patient
from ..models.receptionist import Receptionist
from ..schemas.auth import UserResponse, UserProfileResponse
from ..schemas.profile import DoctorResponse, PatientResponse, ReceptionistResponse


class RoleProfile:
    role: UserRole = None
    model = None
    attr: Optional[str] = None
    fields: Tuple[str, ...] = ()
    response = None

    def load(self, user: User):
        return getattr(user, self.attr) if self.attr else None

    def create(self, db: Session, user: User, data: Dict[str, Any]):
        values = {name: data.get(name) for name in self.fields}
        # Names are NOT NULL; the registration form may leave them blank
        values["first_name"] = values.get("first_name") or ""
        values["last_name"] = values.get("last_name") or ""

        profile = self.model(**values)
        setattr(user, self.attr, profile)
        db.flush()
        return profile

    def update(self, db: Session, user: User, data: Dict[str, Any]):
        profile = self.load(user)
        if profile is None:
            return self.create(db, user, data)

        for name in self.fields:
            if data.get(name) is not None:
                setattr(profile, name, data[name])
        db.flush()
        return profile

    def remove(self, db: Session, user: User) -> None:
        if self.load(user) is not None:
            setattr(user, self.attr, None)
            db.flush()

    def serialize(self, profile) -> Optional[Dict[str, Any]]:
        if profile is None:
            return None
        return self.response.model_validate(profile).model_dump(mode="json")


class DoctorProfile(RoleProfile):
    role = UserRole.DOCTOR
    model = Doctor
    attr = "doctor"
    fields = ("first_name", "last_name", "specialization", "qualification", "phone")
    response = DoctorResponse


class PatientProfile(RoleProfile):
    role = UserRole.PATIENT
    model = Patient
    attr = "patient"
    fields = ("first_name", "last_name", "phone", "date_of_birth", "blood_group", "address")
    response = PatientResponse


class ReceptionistProfile(RoleProfile):
    role = UserRole.RECEPTIONIST
    model = Receptionist
    attr = "receptionist"
    fields = ("first_name", "last_name", "phone")
    response = ReceptionistResponse


class AdminProfile(RoleProfile):
    """Admins have no satellite row."""
    role = UserRole.ADMIN

    def create(self, db, user, data):
        return None

    def update(self, db, user, data):
        return None

    def remove(self, db, user):
        return None


PROFILES = {
    variant.role: variant
    for variant in (DoctorProfile(), PatientProfile(), ReceptionistProfile(), AdminProfile())
}


def profile_for(role) -> RoleProfile:
    return PROFILES[UserRole(role)]


def describe_user(user: User) -> UserProfileResponse:
    """The user together with its role profile, if the role has one."""
    variant = profile_for(user.role)
    return UserProfileResponse(
        user=UserResponse.model_validate(user),
        profile=variant.serialize(variant.load(user)),
    )
