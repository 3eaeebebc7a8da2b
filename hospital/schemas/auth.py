from datetime import date, datetime
from typing import Any, Dict, Optional
from pydantic import BaseModel, EmailStr, Field

from ..core.security import UserRole

# Fields that live on a role's satellite profile rather than on the user row
PROFILE_FIELDS = (
    "first_name",
    "last_name",
    "phone",
    "specialization",
    "qualification",
    "date_of_birth",
    "blood_group",
    "address",
)


class ProfileFields(BaseModel):
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=20)
    specialization: Optional[str] = Field(None, max_length=100)
    qualification: Optional[str] = Field(None, max_length=100)
    date_of_birth: Optional[date] = None
    blood_group: Optional[str] = Field(None, max_length=5)
    address: Optional[str] = None

    def profile_fields(self) -> Dict[str, Any]:
        """Profile values the caller actually supplied."""
        return {
            name: getattr(self, name)
            for name in PROFILE_FIELDS
            if getattr(self, name) is not None
        }


class UserRegister(ProfileFields):
    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=72)
    role: UserRole


class UserLogin(BaseModel):
    # Either the username or the email address
    username: str
    password: str


class UserResponse(BaseModel):
    id: int
    username: str
    email: str
    role: UserRole
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AuthResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    user: UserResponse


class UserProfileResponse(BaseModel):
    user: UserResponse
    profile: Optional[Dict[str, Any]] = None
