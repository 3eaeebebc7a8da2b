from typing import List
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
import logging

from ..models.user import User
from ..core.exceptions import DuplicateUser, UserNotFound
from ..core.security import get_password_hash
from ..schemas.auth import UserProfileResponse
from ..schemas.user import UserUpdate
from .profiles import profile_for, describe_user

logger = logging.getLogger(__name__)

# Profile values kept when a user moves to a role with a different satellite table
CARRIED_FIELDS = ("first_name", "last_name", "phone")

class UserService:
    def __init__(self, db: Session):
        self.db = db

    def list_users(self, skip: int = 0, limit: int = 100) -> List[UserProfileResponse]:
        users = self.db.query(User).order_by(User.id).offset(skip).limit(limit).all()
        return [describe_user(user) for user in users]

    def get_user(self, user_id: int) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise UserNotFound()
        return user

    def update_user(self, user_id: int, user_data: UserUpdate) -> User:
        """
        Apply account and profile changes in one transaction.

        A role change replaces the satellite profile: the old row is deleted
        (taking its appointments with it) and a new one is created for the
        new role from the supplied fields plus the carried-over name and phone.
        """
        user = self.get_user(user_id)
        self._check_unique(user, user_data)

        fields = user_data.profile_fields()

        try:
            if user_data.username:
                user.username = user_data.username
            if user_data.email:
                user.email = user_data.email
            if user_data.password:
                user.password_hash = get_password_hash(user_data.password)

            current = profile_for(user.role)
            if user_data.role and user_data.role != user.role:
                old_profile = current.load(user)
                carried = {}
                if old_profile is not None:
                    carried = {name: getattr(old_profile, name) for name in CARRIED_FIELDS}
                carried.update(fields)

                current.remove(self.db, user)
                logger.info(f"User {user.id} role change: {user.role.value} -> {user_data.role.value}")
                user.role = user_data.role
                profile_for(user.role).create(self.db, user, carried)
            elif fields:
                current.update(self.db, user, fields)

            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise DuplicateUser()
        except Exception:
            self.db.rollback()
            logger.exception(f"Update of user {user_id} rolled back")
            raise

        self.db.refresh(user)
        return user

    def delete_user(self, user_id: int) -> None:
        """Delete the user; its profile, schedules and appointments go with it."""
        user = self.get_user(user_id)
        self.db.delete(user)
        self.db.commit()
        logger.info(f"Deleted user {user_id}")

    def _check_unique(self, user: User, user_data: UserUpdate) -> None:
        clauses = []
        if user_data.username:
            clauses.append(User.username == user_data.username)
        if user_data.email:
            clauses.append(User.email == user_data.email)
        if not clauses:
            return

        clash = self.db.query(User).filter(User.id != user.id, or_(*clauses)).first()
        if clash:
            raise DuplicateUser()
