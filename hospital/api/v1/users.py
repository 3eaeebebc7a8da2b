from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from ...core.database import get_db
from ...api.deps import get_admin_user
from ...services.user_service import UserService
from ...services.profiles import describe_user
from ...schemas.auth import UserProfileResponse
from ...schemas.user import UserUpdate

router = APIRouter(
    prefix="/users",
    tags=["Users"],
    dependencies=[Depends(get_admin_user)]
)

@router.get("", response_model=List[UserProfileResponse])
async def list_users(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db)
):
    """List all users with their profiles (admin only)."""
    return UserService(db).list_users(skip=skip, limit=limit)

@router.get("/{user_id}", response_model=UserProfileResponse)
async def get_user(user_id: int, db: Session = Depends(get_db)):
    """Get a user by id (admin only)."""
    return describe_user(UserService(db).get_user(user_id))

@router.put("/{user_id}", response_model=UserProfileResponse)
async def update_user(
    user_id: int,
    user_data: UserUpdate,
    db: Session = Depends(get_db)
):
    """Update account and profile fields (admin only)."""
    return describe_user(UserService(db).update_user(user_id, user_data))

@router.delete("/{user_id}")
async def delete_user(user_id: int, db: Session = Depends(get_db)):
    """Delete a user and everything it owns (admin only)."""
    UserService(db).delete_user(user_id)
    return {"message": "User deleted successfully"}
