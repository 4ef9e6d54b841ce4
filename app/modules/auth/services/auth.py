import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.core.security import verify_password
from app.modules.auth.schemas.auth import RegisterRequest
from app.modules.user_management.models.user import User
from app.modules.user_management.services.user import create_user, get_user_by_email

logger = logging.getLogger("app")

class EmailAlreadyRegistered(Exception):
    """Raised when registering an email that already has an account"""

def register_user(db: Session, register_in: RegisterRequest) -> User:
    if get_user_by_email(db, register_in.email):
        logger.info(f"Registration rejected, email already in use: {register_in.email}")
        raise EmailAlreadyRegistered(register_in.email)

    return create_user(
        db,
        name=register_in.name,
        email=register_in.email,
        password=register_in.password,
    )

def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    """Return the user for valid credentials, None otherwise"""
    user = get_user_by_email(db, email)
    if not user:
        return None
    if not verify_password(password, user.hashed_password):
        logger.info(f"Failed login for user {user.id}")
        return None
    if not user.is_active:
        logger.info(f"Login attempt for inactive user {user.id}")
        return None
    return user
