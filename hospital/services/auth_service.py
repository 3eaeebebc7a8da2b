from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
import logging

from ..models.user import User
from ..core.exceptions import DuplicateUser
from ..core.security import (
    verify_password, get_password_hash, create_user_token, AuthenticationError
)
from ..schemas.auth import UserLogin, UserRegister, AuthResponse, UserResponse
from .profiles import profile_for

logger = logging.getLogger(__name__)

class AuthService:
    def __init__(self, db: Session):
        self.db = db

    def register_user(self, user_data: UserRegister) -> AuthResponse:
        """Create the user and its role profile in one transaction and issue a token."""
        existing_user = self.db.query(User).filter(
            or_(User.username == user_data.username, User.email == user_data.email)
        ).first()

        if existing_user:
            raise DuplicateUser()

        hashed_password = get_password_hash(user_data.password)

        try:
            new_user = User(
                username=user_data.username,
                email=user_data.email,
                password_hash=hashed_password,
                role=user_data.role,
            )
            self.db.add(new_user)
            self.db.flush()

            profile_for(new_user.role).create(self.db, new_user, user_data.profile_fields())

            self.db.commit()
        except IntegrityError:
            # Lost a race against a concurrent registration
            self.db.rollback()
            raise DuplicateUser()
        except Exception:
            self.db.rollback()
            logger.exception(f"Registration of '{user_data.username}' rolled back")
            raise

        self.db.refresh(new_user)
        logger.info(f"Registered user {new_user.id} ({new_user.role.value})")

        return self._auth_response(new_user)

    def authenticate_user(self, login_data: UserLogin) -> AuthResponse:
        """Authenticate by username or email and return a session token."""
        user = self.db.query(User).filter(
            or_(User.username == login_data.username, User.email == login_data.username)
        ).first()

        if not user or not verify_password(login_data.password, user.password_hash):
            logger.info(f"Failed login for '{login_data.username}'")
            raise AuthenticationError("Invalid credentials")

        return self._auth_response(user)

    def _auth_response(self, user: User) -> AuthResponse:
        token = create_user_token(user.id, user.username, user.email, user.role)
        return AuthResponse(token=token, user=UserResponse.model_validate(user))
