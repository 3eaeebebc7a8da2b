from typing import Optional
from pydantic import EmailStr, Field

from ..core.security import UserRole
from .auth import ProfileFields


class UserUpdate(ProfileFields):
    username: Optional[str] = Field(None, min_length=3, max_length=50)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=6, max_length=72)
    role: Optional[UserRole] = None
